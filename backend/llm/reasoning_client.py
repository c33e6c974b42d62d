"""Single-shot client for the external reasoning engine (OpenAI-compatible chat completions)."""

import json
import logging
import math
from dataclasses import dataclass

from openai import APIConnectionError, APIStatusError, APITimeoutError, OpenAI

from engine.config import ENGINE_TEMPERATURE
from utils.errors import (
    EngineEmptyOutputError,
    EngineMalformedOutputError,
    EngineTimeoutError,
    EngineTransportError,
)
from utils.settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedOk:
    data: dict
    recovered: bool = False


@dataclass(frozen=True)
class Unparseable:
    reason: str


def _reject_constant(name: str):
    raise ValueError(f"Non-standard JSON constant: {name}")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"Number out of range: {text}")
    return value


def _loads_object(text: str) -> dict | None:
    # NaN and Infinity are not JSON and cannot be sent on in the response.
    try:
        value = json.loads(text, parse_constant=_reject_constant, parse_float=_finite_float)
    except ValueError:
        return None
    return value if isinstance(value, dict) else None


def parse_structured_output(text: str) -> ParsedOk | Unparseable:
    """
    Strict parse first, then the span between the first "{" and the last "}".

    The second stage tolerates engines that wrap the JSON in prose or code
    fences despite being told not to.
    """
    data = _loads_object(text)
    if data is not None:
        return ParsedOk(data)

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return Unparseable("Model output is not JSON and contains no JSON object")

    data = _loads_object(text[start:end + 1])
    if data is None:
        return Unparseable("Model output contains braces but no parseable JSON object")
    return ParsedOk(data, recovered=True)


def _extract_text(response) -> str:
    choices = getattr(response, "choices", None) or []
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None) if message is not None else None
    return (content or "").strip()


class ReasoningEngineClient:
    """Sends one instruction per call. No retry, no backoff."""

    def __init__(self, client, model: str, temperature: float = ENGINE_TEMPERATURE):
        self.client = client
        self.model = model
        self.temperature = temperature

    def invoke(self, instruction: str) -> dict:
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": instruction}],
                temperature=self.temperature,
                response_format={"type": "json_object"},
            )
        except APITimeoutError as exc:
            raise EngineTimeoutError(f"Reasoning engine timed out: {exc}") from exc
        except APIStatusError as exc:
            body = exc.response.text
            raise EngineTransportError(body or str(exc), status_code=exc.status_code, body=body) from exc
        except APIConnectionError as exc:
            raise EngineTransportError(f"Reasoning engine unreachable: {exc}") from exc

        text = _extract_text(response)
        if not text:
            raise EngineEmptyOutputError("No model text returned")

        parsed = parse_structured_output(text)
        if isinstance(parsed, Unparseable):
            raise EngineMalformedOutputError(parsed.reason, raw_text=text)
        if parsed.recovered:
            logger.warning("Recovered JSON object from wrapped model output (%d chars)", len(text))
        return parsed.data


def build_engine_client(settings: Settings) -> ReasoningEngineClient | None:
    """Return None when no credential is configured."""
    if not settings.engine_configured:
        return None
    client = OpenAI(
        api_key=settings.engine_api_key,
        base_url=settings.engine_base_url,
        timeout=settings.engine_timeout_seconds,
        max_retries=0,
    )
    return ReasoningEngineClient(client, settings.engine_model)

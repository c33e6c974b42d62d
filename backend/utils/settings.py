"""Process configuration, resolved once from the environment at startup."""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

DEFAULT_ENGINE_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_ENGINE_MODEL = "llama-3.3-70b-versatile"
DEFAULT_ORIGINS = ("http://localhost:5173", "http://localhost:8501")


@dataclass(frozen=True)
class Settings:
    engine_api_key: str | None = None
    engine_base_url: str = DEFAULT_ENGINE_BASE_URL
    engine_model: str = DEFAULT_ENGINE_MODEL
    engine_timeout_seconds: float = 30.0
    allowed_origins: tuple[str, ...] = field(default=DEFAULT_ORIGINS)
    port: int = 5051
    log_level: str = "INFO"

    @property
    def engine_configured(self) -> bool:
        return bool(self.engine_api_key)


def normalize_model_name(raw: str) -> str:
    """Accept both "models/<name>" and "<name>"."""
    return raw[len("models/"):] if raw.startswith("models/") else raw


def load_settings(env: dict | None = None) -> Settings:
    """Build Settings from `env` (defaults to os.environ after loading .env)."""
    if env is None:
        load_dotenv()
        env = os.environ

    origins = list(DEFAULT_ORIGINS)
    frontend_url = env.get("FRONTEND_URL")
    if frontend_url and frontend_url not in origins:
        origins.append(frontend_url)

    return Settings(
        engine_api_key=env.get("GROQ_API_KEY") or None,
        engine_base_url=env.get("ENGINE_BASE_URL") or DEFAULT_ENGINE_BASE_URL,
        engine_model=normalize_model_name(env.get("ENGINE_MODEL") or DEFAULT_ENGINE_MODEL),
        engine_timeout_seconds=float(env.get("ENGINE_TIMEOUT_SECONDS") or 30),
        allowed_origins=tuple(origins),
        port=int(env.get("PORT") or 5051),
        log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
    )

"""Inbound request schema for /api/analyze and a validation step that never raises."""

from dataclasses import dataclass, field

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from engine.config import ENCOURAGED_CAP_PERCENT, MAX_CAP_PERCENT, MIN_NOTES_LENGTH


class AnalysisRequest(BaseModel):
    # NaN and Infinity cannot be serialized back into the JSON response.
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    raw_notes: str = Field(
        min_length=MIN_NOTES_LENGTH,
        validation_alias=AliasChoices("rawNotes", "raw_notes"),
    )
    issue_type: str = Field(
        min_length=1,
        validation_alias=AliasChoices("issueType", "issue_type"),
    )
    booking_total: float | None = Field(
        default=None,
        validation_alias=AliasChoices("bookingTotal", "booking_total"),
    )
    refunded_amount: float | None = Field(
        default=None,
        validation_alias=AliasChoices("refundedAmount", "refunded_amount"),
    )
    # The form always sends the policy constants; overriding them is for tests.
    encouraged_cap_percent: float = Field(
        default=ENCOURAGED_CAP_PERCENT,
        validation_alias=AliasChoices(
            "encouragedCapPercent", "encouragedRefundCapPercent", "encouraged_cap_percent",
        ),
    )
    max_cap_percent: float = Field(
        default=MAX_CAP_PERCENT,
        validation_alias=AliasChoices("maxCapPercent", "maxRefundCapPercent", "max_cap_percent"),
    )

    @field_validator("booking_total", "refunded_amount", mode="before")
    @classmethod
    def _blank_amount_is_null(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("issue_type")
    @classmethod
    def _issue_type_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("issueType must not be blank")
        return value

    @field_validator("encouraged_cap_percent", mode="before")
    @classmethod
    def _default_encouraged_cap(cls, value):
        return ENCOURAGED_CAP_PERCENT if value is None else value

    @field_validator("max_cap_percent", mode="before")
    @classmethod
    def _default_max_cap(cls, value):
        return MAX_CAP_PERCENT if value is None else value


@dataclass(frozen=True)
class ValidRequest:
    request: AnalysisRequest


@dataclass(frozen=True)
class InvalidRequest:
    message: str
    errors: list[dict] = field(default_factory=list)


def validate_analysis_request(payload) -> ValidRequest | InvalidRequest:
    """Check a decoded JSON body against AnalysisRequest."""
    if not isinstance(payload, dict):
        return InvalidRequest("Request body must be a JSON object")
    try:
        return ValidRequest(AnalysisRequest.model_validate(payload))
    except ValidationError as exc:
        errors = exc.errors(include_url=False)
        return InvalidRequest(_format_errors(errors), errors)


def _format_errors(errors: list[dict]) -> str:
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ())) or "body"
        parts.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts)

"""Agent-side analysis flow: compose, submit, display, persist, report audit status."""

import logging
import math
from dataclasses import dataclass, replace
from enum import Enum

from workflow.errors import AnalysisRequestError, AuditWriteError

logger = logging.getLogger(__name__)

ENCOURAGED_CAP_PERCENT = 15
MAX_CAP_PERCENT = 20
CAUTION_BAND_POINTS = 3

ISSUE_TYPES = [
    "Refund",
    "Cancellation",
    "Modification",
    "Double Charge",
    "Fraud Claim",
    "Rebooking",
    "Other",
]
DEFAULT_ISSUE_TYPE = "Modification"


class SubmissionState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    DISPLAYING = "displaying"
    ERROR_DISPLAYED = "error_displayed"


class AuditState(str, Enum):
    NONE = "none"
    PENDING = "pending"
    SAVING = "saving"
    SAVED = "saved"
    FAILED = "failed"


@dataclass
class AnalysisForm:
    raw_notes: str = ""
    issue_type: str = DEFAULT_ISSUE_TYPE
    booking_total: str = ""
    refunded_amount: str = ""
    agent_email: str = ""


@dataclass(frozen=True)
class CapHint:
    level: str
    message: str


def to_number(value) -> float | None:
    """Parse a form field. Blank, non-numeric and non-finite input is None."""
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def compute_refund_percent(total: float | None, refunded: float | None) -> float | None:
    # Must stay identical to the server's formula so the UI shows the percent the API used.
    if total is None or total <= 0:
        return None
    if refunded is None:
        return None
    return (refunded / total) * 100


def cap_hint(refund_percent: float | None,
             encouraged_cap_percent: float = ENCOURAGED_CAP_PERCENT,
             caution_band: float = CAUTION_BAND_POINTS) -> CapHint | None:
    if refund_percent is None:
        return None
    if refund_percent > encouraged_cap_percent:
        return CapHint("escalate", f"🚨 Over {encouraged_cap_percent:g}% cap: escalation required")
    if refund_percent >= encouraged_cap_percent - caution_band:
        return CapHint("caution", f"⚠️ Close to {encouraged_cap_percent:g}% cap: be careful")
    return None


def build_audit_record(form: AnalysisForm, result: dict, refund_percent: float | None) -> dict:
    """
    Request fields, the client-side refund percent and every result field.

    The store adds `created_at` on insert.
    """
    record = {
        "agent_email": form.agent_email.strip() or "unknown",
        "issue_type": form.issue_type,
        "raw_notes": form.raw_notes,
        "booking_total": to_number(form.booking_total),
        "refunded_amount": to_number(form.refunded_amount),
        "refund_percent": refund_percent,
    }
    for key, value in result.items():
        record.setdefault(key, value)
    for key in ("signals", "warnings", "recommended_script", "next_steps", "missing_info"):
        if record.get(key) is None:
            record[key] = []
    record["policy"] = record.get("policy") or {}
    record["meta"] = record.get("meta") or {}
    return record


class AnalysisWorkflow:
    """
    Holds the form and the two state tracks.

    submission: idle -> submitting -> displaying | error_displayed
    audit:      none -> pending -> saving -> saved | failed

    The audit write only starts from `pending`, which is set once a result
    is ready to display.
    """

    def __init__(self, encouraged_cap_percent: float = ENCOURAGED_CAP_PERCENT,
                 max_cap_percent: float = MAX_CAP_PERCENT):
        self.encouraged_cap_percent = encouraged_cap_percent
        self.max_cap_percent = max_cap_percent
        self.form = AnalysisForm()
        self._reset_outcome()

    def _reset_outcome(self):
        self.state = SubmissionState.IDLE
        self.audit_state = AuditState.NONE
        self.result: dict | None = None
        self.error: str | None = None
        self.audit_message: str | None = None
        self.audit_record_id: int | None = None
        self._submitted_form: AnalysisForm | None = None
        self._submitted_percent: float | None = None

    @property
    def refund_percent(self) -> float | None:
        return compute_refund_percent(to_number(self.form.booking_total), to_number(self.form.refunded_amount))

    @property
    def cap_hint(self) -> CapHint | None:
        return cap_hint(self.refund_percent, self.encouraged_cap_percent)

    @property
    def can_submit(self) -> bool:
        return self.state != SubmissionState.SUBMITTING and bool(self.form.raw_notes.strip())

    def build_payload(self) -> dict:
        return {
            "rawNotes": self.form.raw_notes,
            "issueType": self.form.issue_type,
            "bookingTotal": to_number(self.form.booking_total),
            "refundedAmount": to_number(self.form.refunded_amount),
            "encouragedRefundCapPercent": self.encouraged_cap_percent,
            "maxRefundCapPercent": self.max_cap_percent,
        }

    def submit(self, api) -> bool:
        """Send the form to the API. Returns True when a result is ready to display."""
        if not self.can_submit:
            return False

        self._reset_outcome()
        self.state = SubmissionState.SUBMITTING
        self._submitted_form = replace(self.form)
        self._submitted_percent = self.refund_percent

        try:
            result = api.analyze(self.build_payload())
        except AnalysisRequestError as exc:
            logger.warning("Analysis failed: %s", exc)
            self.state = SubmissionState.ERROR_DISPLAYED
            self.error = str(exc)
            return False

        self.result = result
        self.state = SubmissionState.DISPLAYING
        self.audit_state = AuditState.PENDING
        return True

    def persist(self, store) -> bool:
        """Append the displayed result to the audit store. A failure leaves the result in place."""
        if self.audit_state != AuditState.PENDING:
            return False

        self.audit_state = AuditState.SAVING
        self.audit_message = "Saving to audit log..."
        record = build_audit_record(self._submitted_form, self.result, self._submitted_percent)
        try:
            self.audit_record_id = store.append(record)
        except AuditWriteError as exc:
            self.audit_state = AuditState.FAILED
            self.audit_message = f"❌ {exc}"
            return False

        self.audit_state = AuditState.SAVED
        self.audit_message = "✅ Saved to audit log (risk_analyses)."
        return True

    def clear(self) -> bool:
        """Reset every field, agent email included. Not allowed mid-submission."""
        if self.state == SubmissionState.SUBMITTING:
            return False
        self.form = AnalysisForm()
        self._reset_outcome()
        return True

"""Builds the policy-constrained instruction sent to the reasoning engine."""

from engine.request_validation import AnalysisRequest

OUTPUT_SCHEMA = """{
  "risk_score": number,
  "risk_level": "low" | "medium" | "high",
  "confidence": number,
  "signals": [
    { "name": string, "evidence_quote": string, "weight": number }
  ],
  "warnings": [string],
  "recommended_script": [string],
  "next_steps": [string],
  "missing_info": [string],
  "policy": {
    "encouraged_cap_percent": number,
    "max_cap_percent": number,
    "refund_percent": number | null,
    "soft_cap_exceeded": boolean,
    "hard_cap_exceeded": boolean
  }
}"""


def format_number(value: float | None) -> str:
    """15.0 -> "15", 85.06 -> "85.06", None -> "unknown"."""
    if value is None:
        return "unknown"
    return f"{value:g}" if float(value).is_integer() else str(value)


def format_refund_percent(refund_percent: float | None) -> str:
    if refund_percent is None:
        return "unknown"
    return f"{refund_percent:.2f}%"


def build_instruction(request: AnalysisRequest, refund_percent: float | None) -> str:
    """
    Compose the full instruction for one analysis.

    The agent notes are embedded exactly as typed. Nothing in them is
    interpreted or escaped here.
    """
    encouraged = format_number(request.encouraged_cap_percent)
    maximum = format_number(request.max_cap_percent)

    return f"""You are a Refund & Chargeback Risk Predictor for a travel call center.

POLICY (NON-NEGOTIABLE):
- Encouraged refund cap: {encouraged}% (try to stay at or under this)
- Maximum agent refund cap: {maximum}% (agents may refund up to this, but it should trigger escalation)
- If refund percent is strictly between {encouraged}% and {maximum}%, treat as HIGH scrutiny and recommend escalation/manager review.
- If refund percent is above {maximum}%, label it as a POLICY VIOLATION and recommend immediate manager escalation.
- Never promise refunds, approvals, or free upgrades.

Return ONLY valid JSON with this exact shape:
{OUTPUT_SCHEMA}

RISK GUIDELINES:
- Sales error/misrepresentation claims, billing discrepancies, angry disconnects, hotel unreachable => increase risk
- Missing info => reduce confidence and request clarification
- confidence must be between 0 and 1

INPUTS:
Issue Type: {request.issue_type}
Booking Total: {format_number(request.booking_total)}
Refunded Amount: {format_number(request.refunded_amount)}
Refund Percent: {format_refund_percent(refund_percent)}

AGENT NOTES:
\"\"\"
{request.raw_notes}
\"\"\""""

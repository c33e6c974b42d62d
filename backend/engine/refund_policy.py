"""Deterministic refund percentage and cap evaluation."""

from dataclasses import asdict, dataclass

from engine.config import ENCOURAGED_CAP_PERCENT, MAX_CAP_PERCENT


@dataclass(frozen=True)
class RefundPolicyFacts:
    refund_percent: float | None
    soft_cap_exceeded: bool
    hard_cap_exceeded: bool
    encouraged_cap_percent: float
    max_cap_percent: float

    def to_dict(self) -> dict:
        return asdict(self)


def compute_refund_percent(total: float | None, refunded: float | None) -> float | None:
    """
    Refunded amount as a percentage of the booking total.

    Returns None when the total is missing or not positive, or the refunded
    amount is missing. The result is not clamped, so over-refunds exceed 100.
    """
    if total is None or total <= 0:
        return None
    if refunded is None:
        return None
    return (refunded / total) * 100


def evaluate_refund_policy(total: float | None, refunded: float | None,
                           encouraged_cap_percent: float = ENCOURAGED_CAP_PERCENT,
                           max_cap_percent: float = MAX_CAP_PERCENT) -> RefundPolicyFacts:
    """Compute the refund percent and both cap flags. A percent exactly at a cap is compliant."""
    refund_percent = compute_refund_percent(total, refunded)
    if refund_percent is None:
        soft = hard = False
    else:
        soft = refund_percent > encouraged_cap_percent
        hard = refund_percent > max_cap_percent
    return RefundPolicyFacts(
        refund_percent=refund_percent,
        soft_cap_exceeded=soft,
        hard_cap_exceeded=hard,
        encouraged_cap_percent=encouraged_cap_percent,
        max_cap_percent=max_cap_percent,
    )

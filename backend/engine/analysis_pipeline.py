"""One analysis, end to end: validate, compute policy, build instruction, call engine, reconcile."""

import logging

from engine.reconciler import reconcile
from engine.refund_policy import evaluate_refund_policy
from engine.request_validation import InvalidRequest, validate_analysis_request
from llm.instruction_builder import build_instruction
from utils.errors import AnalysisValidationError, EngineNotConfiguredError

logger = logging.getLogger(__name__)


def run_analysis(payload, engine, model: str | None = None) -> dict:
    """
    Run the pipeline for a decoded request body.

    Raises an AnalysisError subclass at the first failing step; nothing is
    retried and no partial result is returned. The engine is called at most
    once, and only after validation succeeds.
    """
    outcome = validate_analysis_request(payload)
    if isinstance(outcome, InvalidRequest):
        raise AnalysisValidationError(outcome.message)
    request = outcome.request

    facts = evaluate_refund_policy(
        request.booking_total,
        request.refunded_amount,
        request.encouraged_cap_percent,
        request.max_cap_percent,
    )
    logger.debug(
        "Policy computed: refund_percent=%s soft=%s hard=%s",
        facts.refund_percent, facts.soft_cap_exceeded, facts.hard_cap_exceeded,
    )

    instruction = build_instruction(request, facts.refund_percent)

    if engine is None:
        raise EngineNotConfiguredError("Reasoning engine is not configured (GROQ_API_KEY missing)")
    engine_output = engine.invoke(instruction)

    return reconcile(engine_output, facts, model=model)

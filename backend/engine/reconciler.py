"""Merges engine output with locally computed policy facts into the final AnalysisResult."""

import logging
from collections.abc import Mapping

from engine.config import SEQUENCE_FIELDS
from engine.refund_policy import RefundPolicyFacts
from utils.errors import ReconciliationError

logger = logging.getLogger(__name__)


def reconcile(engine_output, facts: RefundPolicyFacts, model: str | None = None) -> dict:
    """
    Build the response body from the engine's object and the local policy facts.

    - `policy` is always present. Engine policy fields are applied first and
      the locally computed ones are laid over them, so refund percent, both
      cap flags and both caps always come from `facts`. Extra engine policy
      fields survive.
    - Sequence fields the engine omitted (or sent as something other than a
      list) become empty lists.
    - Everything else passes through unchanged.
    """
    if not isinstance(engine_output, Mapping):
        raise ReconciliationError(
            f"Engine output must be a JSON object, got {type(engine_output).__name__}"
        )

    result = dict(engine_output)

    for name in SEQUENCE_FIELDS:
        value = result.get(name)
        if not isinstance(value, list):
            if value is not None:
                logger.warning("Dropping non-list %s from engine output", name)
            result[name] = []

    engine_policy = result.get("policy")
    policy = dict(engine_policy) if isinstance(engine_policy, Mapping) else {}
    policy.update(facts.to_dict())
    result["policy"] = policy

    engine_meta = result.get("meta")
    meta = dict(engine_meta) if isinstance(engine_meta, Mapping) else {}
    if model:
        meta["model"] = model
    result["meta"] = meta

    return result

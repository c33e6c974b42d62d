"""Refund policy constants and engine call parameters."""

# Refund caps, as a percentage of the booking total
ENCOURAGED_CAP_PERCENT = 15
MAX_CAP_PERCENT = 20

# Notes shorter than this are rejected before the engine is called
MIN_NOTES_LENGTH = 10

# Engine output fields that must always be lists in the final result
SEQUENCE_FIELDS = (
    "signals",
    "warnings",
    "recommended_script",
    "next_steps",
    "missing_info",
)

ENGINE_TEMPERATURE = 0.2

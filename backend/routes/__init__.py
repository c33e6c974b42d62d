from . import analyze, health

__all__ = [
    "analyze",
    "health",
]

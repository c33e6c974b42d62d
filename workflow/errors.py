"""Errors surfaced in the agent UI."""


class AnalysisRequestError(Exception):
    """The analysis API call failed. Carries the server's error text when there is one."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AuditWriteError(Exception):
    """Appending to the audit store failed. The displayed analysis stays valid."""

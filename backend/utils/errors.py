"""Error taxonomy for the analysis pipeline. Every error here becomes a 400 {"error": ...} response."""


class AnalysisError(Exception):
    """Base class for any failure that aborts an analysis."""


class AnalysisValidationError(AnalysisError):
    """The inbound request failed schema validation. Raised before the engine is called."""


class EngineNotConfiguredError(AnalysisError):
    pass


class EngineTransportError(AnalysisError):
    """The reasoning engine answered with a non-success status or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class EngineTimeoutError(EngineTransportError):
    pass


class EngineEmptyOutputError(AnalysisError):
    pass


class EngineMalformedOutputError(AnalysisError):
    """Engine text could not be recovered as a JSON object, even after brace-span extraction."""

    def __init__(self, message: str, raw_text: str | None = None):
        super().__init__(message)
        self.raw_text = raw_text


class ReconciliationError(AnalysisError):
    pass

from typing import Optional


class AdvisorError(Exception):
    """Base error; rendered as {"error": message, "details": details}."""
    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class InvalidRequest(AdvisorError):
    status_code = 400


class PdfExtractionError(AdvisorError):
    pass


class CompletionError(AdvisorError):
    pass


class MalformedModelOutput(AdvisorError):
    def __init__(self, message: str, details: Optional[str] = None, raw: str = ""):
        super().__init__(message, details)
        self.raw = raw


class WeatherUnavailable(AdvisorError):
    pass


class StageFailed(AdvisorError):
    """A pipeline stage failed; `message` is what the endpoint reports."""

    def __init__(self, message: str, cause: Exception):
        super().__init__(message, str(cause))
        self.cause = cause

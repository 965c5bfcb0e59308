"""Application error types and their HTTP status codes."""


class LedgerError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(LedgerError):
    status_code = 404


class ValidationError(LedgerError):
    """Invalid request parameters."""
    status_code = 400


class ExternalApiError(LedgerError):
    """Upstream exchange API request failed."""
    status_code = 502


class InternalError(LedgerError):
    status_code = 500

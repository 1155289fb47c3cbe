"""
Shared exceptions for the extraction relay.
"""


class RelayError(Exception):
    """Base class for failures surfaced to the caller."""

    pass


class ConfigurationError(RelayError):
    """Raised when the upstream credential is not configured."""

    pass


class RequestValidationError(RelayError):
    """Raised when the inbound document fails validation."""

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = list(errors)


class UpstreamTimeoutError(RelayError):
    """Raised when the upstream call exceeds the platform deadline."""

    def __init__(self, deadline_seconds: float):
        super().__init__(f"Upstream call exceeded {deadline_seconds:g}s deadline")
        self.deadline_seconds = deadline_seconds


class UpstreamError(RelayError):
    """Raised when the upstream API answers with a non-success status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class TransportError(RelayError):
    """Raised on network failures or unreadable payloads."""

    pass

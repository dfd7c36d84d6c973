from typing import Any, Optional


class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io

    `log_level` decides how loudly @Logger.io reports the error, `code` is the
    machine readable identifier returned to HTTP clients.
    """

    log_level: str = 'ERROR'
    code: str = 'error'

    def __init__(
        self, message: str, status_code: int, *, details: Optional[dict[str, Any]] = None
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.details: dict[str, Any] = details or {}
        super().__init__(message)


class DomainError(CustomBaseError):
    log_level = 'WARNING'
    code = 'invalid_request'

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        *,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, status_code, details=details)


class NotFoundError(CustomBaseError):
    log_level = 'WARNING'
    code = 'not_found'

    def __init__(self, message: str, *, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message, 404, details=details)


class ConflictError(CustomBaseError):
    """Business rule rejection: expected, audited at INFO."""

    log_level = 'INFO'
    code = 'conflict'

    def __init__(self, message: str, *, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message, 409, details=details)


class IntegrityViolationError(CustomBaseError):
    """Data or integration inconsistency that needs an operator."""

    log_level = 'CRITICAL'
    code = 'integrity_error'

    def __init__(self, message: str, *, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message, 500, details=details)


class BadGatewayError(CustomBaseError):
    code = 'bad_gateway'

    def __init__(self, message: str, *, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message, 502, details=details)


class ServiceUnavailableError(CustomBaseError):
    """Transient dependency failure, safe to retry."""

    code = 'service_unavailable'

    def __init__(self, message: str, *, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message, 503, details=details)

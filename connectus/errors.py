"""Typed service errors.

Services raise these; routers turn them into ``HTTPException`` via
:func:`as_http_exception` so every failure carries a machine-readable ``code``.
"""

from __future__ import annotations

from fastapi import HTTPException, status


class ServiceError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "error"
    retryable: bool = False

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_detail(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


class ValidationFailed(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class Forbidden(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"


class Conflict(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


class ExternalServiceError(ServiceError):
    """An upstream dependency (RPC node, LLM provider) could not be reached."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "service_unavailable"
    retryable = True


class ServerMisconfigured(ServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "server_misconfigured"


def as_http_exception(exc: ServiceError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.to_detail())

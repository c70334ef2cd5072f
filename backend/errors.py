# errors.py — Service error taxonomy shared by resolvers, policy and orchestrators
from typing import Optional


class ServiceError(Exception):
    """Base class for failures raised below the HTTP layer.

    ``kind`` is the stable identifier returned to clients; ``http_status`` is
    what the transport maps it to.
    """

    kind = "internal"
    http_status = 500

    def __init__(self, message: str, *, detail: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail or {}

    def to_dict(self) -> dict:
        return {"error": self.kind, "detail": self.message, **self.detail}


class NotFoundError(ServiceError):
    kind = "not_found"
    http_status = 404


class UnauthorizedError(ServiceError):
    kind = "unauthorized"
    http_status = 403


class InvalidArgumentError(ServiceError):
    kind = "invalid_argument"
    http_status = 400


class ConflictError(ServiceError):
    kind = "conflict"
    http_status = 409


class UnavailableError(ServiceError):
    kind = "unavailable"
    http_status = 503

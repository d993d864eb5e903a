"""Failure kinds raised by the service layer.

Services never build HTTP responses. Each failure carries the status code the
API layer maps it to, so the mapping lives in one exception handler.
"""


class ServiceError(Exception):
    status_code = 500
    default_detail = "Internal error."

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(ServiceError):
    status_code = 400
    default_detail = "Invalid request."


class AuthenticationError(ServiceError):
    status_code = 401
    default_detail = "Not authenticated."


class ForbiddenError(ServiceError):
    status_code = 403
    default_detail = "Access denied."


class NotFoundError(ServiceError):
    status_code = 404
    default_detail = "Not found."


class ConflictError(ServiceError):
    status_code = 409
    default_detail = "Conflict."

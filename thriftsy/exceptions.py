class ServiceError(ValueError):
    """Base error raised by services, carries the HTTP status it maps to"""

    status_code = 400
    default_message = "Bad request"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = str(self)


class ValidationError(ServiceError):
    status_code = 400
    default_message = "Invalid input"


class UnauthorizedError(ServiceError):
    status_code = 401
    default_message = "Unauthorized"


class ForbiddenError(ServiceError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(ServiceError):
    status_code = 404
    default_message = "Resource not found"


class ConflictError(ServiceError):
    status_code = 409
    default_message = "Conflict"

class AppError(Exception):
    """Base class for failures surfaced to the API caller."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = 400


class InvalidState(AppError):
    status_code = 400


class Conflict(AppError):
    status_code = 400


class CapacityExceeded(AppError):
    status_code = 400


class Unauthenticated(AppError):
    status_code = 401


class Forbidden(AppError):
    status_code = 403


class NotFound(AppError):
    status_code = 404


class InternalError(AppError):
    status_code = 500

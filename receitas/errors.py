class AppError(Exception):
    """Base class for failures reported to the API caller.

    ``message`` is sent verbatim in the response body, so it must never
    contain internal details.
    """

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = 400


class Conflict(AppError):
    status_code = 400


class AuthError(AppError):
    status_code = 401


class NotFound(AppError):
    status_code = 404


class ServiceError(AppError):
    status_code = 500

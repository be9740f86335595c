# errors.py
# service-level errors. the app maps each to its status code and an {"error": ...} body


class SeleneError(Exception):
    """Base class for errors raised by the services."""

    status_code: int = 500
    message: str = "Server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationError(SeleneError):
    status_code = 400
    message = "Invalid request"


class NotFound(SeleneError):
    status_code = 404
    message = "Not found"


class Forbidden(SeleneError):
    status_code = 403
    message = "Forbidden"


class InvalidState(SeleneError):
    status_code = 400
    message = "Invalid state"


class UpstreamFailure(SeleneError):
    status_code = 500
    message = "Upstream failure"

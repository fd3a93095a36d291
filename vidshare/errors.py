class VidshareError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.message}


class InvalidInput(VidshareError):
    status_code = 400
    default_message = "Missing fields"


class Unauthorized(VidshareError):
    status_code = 401
    default_message = "Email or password is incorrect"


class Forbidden(VidshareError):
    status_code = 403
    default_message = "Cannot delete default videos"


class NotFound(VidshareError):
    status_code = 404
    default_message = "Not found"


class Conflict(VidshareError):
    status_code = 409
    default_message = "Already exists"

from typing import Any, Dict


class AppError(Exception):
    """
    Base of every failure a service reports to its caller.
    status_code is the stable numeric category; message is safe to show to users.
    """

    status_code: int = 500
    default_message: str = "Internal error"

    def __init__(self, message: str = "") -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": False, "status": self.status_code, "error": self.message}


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Not allowed"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Already exists"


class InternalError(AppError):
    status_code = 500
    default_message = "Something went wrong"


class UpstreamError(AppError):
    status_code = 502
    default_message = "Upstream service failed"

from fastapi import HTTPException


class AppError(HTTPException):
    """Base for errors the handlers raise on purpose.

    Rendered by the responders in ``main.py`` as ``{"message": detail}``.
    """
    status_code: int = 500
    default_detail: str = "Internal server error"

    def __init__(self, detail: str | None = None, headers: dict[str, str] | None = None) -> None:
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail, headers=headers)


class ValidationError(AppError):
    status_code = 400
    default_detail = "Bad request"


class AuthError(AppError):
    status_code = 401
    default_detail = "Not authorized"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class NotFoundError(AppError):
    status_code = 404
    default_detail = "Not found"


class ConflictError(AppError):
    status_code = 409
    default_detail = "Conflict"

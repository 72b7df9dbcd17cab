from accounts.utils.base.enums import BaseEnum, Subscription
from accounts.utils.base.errors import AppError, AuthError, ConflictError, NotFoundError, ValidationError

__all__ = [
    "BaseEnum",
    "Subscription",
    "AppError",
    "AuthError",
    "ConflictError",
    "NotFoundError",
    "ValidationError",
]

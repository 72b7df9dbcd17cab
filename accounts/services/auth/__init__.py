import logging
import uuid
from datetime import datetime, timedelta, timezone

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from passlib.context import CryptContext
from jose import jwt, JWTError
from mongoengine.errors import ValidationError as MongoValidationError

from accounts.models.user import User
from accounts.services import token_denylist
from accounts.utils.base import AuthError
from accounts.utils.config import settings


logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds)
# auto_error is off so a missing header goes through AuthError like every other failure
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/users/login", auto_error=False)


def verify_password(plain: str, hashed: str) -> bool:
    """Verify plaintext password against a bcrypt hash."""
    return pwd_context.verify(plain, hashed)


def hash_password(plain: str) -> str:
    """Hash a plaintext password using bcrypt."""
    return pwd_context.hash(plain)


def create_token(user: User, expires_delta: timedelta | None = None) -> str:
    """Create a signed JWT carrying the user id as subject."""
    now = datetime.now(timezone.utc)
    expires_delta = expires_delta or timedelta(minutes=settings.token_expires_minutes)
    payload = {
        "sub": str(user.id),
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str | None) -> dict:
    """Verify signature and expiry of a token and return its payload.

    Raises AuthError for missing, malformed, expired or revoked tokens.
    """
    if not token:
        raise AuthError("Not authorized")
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        logger.debug("Rejected token: %s", exc)
        raise AuthError("Token is invalid")

    if not payload.get("sub"):
        raise AuthError("Token is invalid")
    if settings.token_denylist_enabled and token_denylist.is_revoked(payload):
        raise AuthError("Token is invalid")
    return payload


def load_token_user(payload: dict) -> User:
    """Return the user a decoded token points at, or raise AuthError."""
    try:
        user = User.objects(id=payload["sub"]).first()
    except MongoValidationError:
        # sub that is not an ObjectId
        logger.debug("Token subject %r is not a user id", payload["sub"])
        user = None
    if not user:
        raise AuthError("Not authorized")
    return user


def get_current_user(token: str | None = Depends(oauth2_scheme)) -> User:
    """Auth dependency that validates a bearer token and returns its user."""
    return load_token_user(decode_token(token))

import logging
import uuid
from typing import Any

from fastapi import APIRouter, Depends, File, Response, UploadFile
from mongoengine.errors import NotUniqueError
from pydantic import BaseModel, field_validator

from accounts.models.user import User
from accounts.services import token_denylist
from accounts.services.auth import (
    create_token,
    decode_token,
    get_current_user,
    hash_password,
    load_token_user,
    oauth2_scheme,
    verify_password,
)
from accounts.services.avatars import gravatar_url, publish_avatar, receive_upload
from accounts.services.validation import check_email, check_password, is_valid_subscription
from accounts.utils.base import AuthError, ConflictError, NotFoundError, ValidationError
from accounts.utils.config import settings


logger = logging.getLogger(__name__)

router = APIRouter()


class UserProfile(BaseModel):
    email: str
    subscription: str
    avatarURL: str | None = None


class AuthResponse(BaseModel):
    token: str
    user: UserProfile


class StatusEnvelope(BaseModel):
    status: str = "success"
    code: int = 200
    data: UserProfile


class CredentialsBody(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        return check_email(value)

    @field_validator("password")
    @classmethod
    def _check_password(cls, value: str) -> str:
        return check_password(value)


class SubscriptionBody(BaseModel):
    subscription: Any = None


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(body: CredentialsBody) -> AuthResponse:
    # Cheap pre-check; the unique index still decides if two requests race
    if User.objects(email=body.email).first():
        raise ConflictError("Email in use")

    user = User(
        email=body.email,
        password=hash_password(body.password),
        avatar_url=gravatar_url(body.email),
        verification_token=uuid.uuid4().hex,
    )
    try:
        user.save()
    except NotUniqueError:
        raise ConflictError("Email in use")

    logger.info("Registered user %s", user.id)
    return AuthResponse(token=create_token(user), user=UserProfile(**user.to_profile()))


@router.post("/login", response_model=AuthResponse)
def login(body: CredentialsBody) -> AuthResponse:
    user = User.objects(email=body.email).first()
    # Same error for unknown email and wrong password
    if not user or not verify_password(body.password, user.password):
        raise AuthError("Invalid credentials")
    return AuthResponse(token=create_token(user), user=UserProfile(**user.to_profile()))


@router.post("/logout", status_code=204)
def logout(token: str | None = Depends(oauth2_scheme)) -> Response:
    payload = decode_token(token)
    user = load_token_user(payload)
    if settings.token_denylist_enabled:
        token_denylist.revoke(payload)
    logger.info("User %s logged out", user.id)
    return Response(status_code=204)


@router.get("/current", response_model=AuthResponse)
def current(
    current_user: User = Depends(get_current_user),
    token: str | None = Depends(oauth2_scheme),
) -> AuthResponse:
    if not current_user or not token:
        raise AuthError("Token is invalid")
    return AuthResponse(token=token, user=UserProfile(**current_user.to_profile()))


@router.patch("/", response_model=StatusEnvelope)
def update_subscription(
    body: SubscriptionBody,
    current_user: User = Depends(get_current_user),
) -> StatusEnvelope:
    if not is_valid_subscription(body.subscription):
        raise ValidationError("Invalid subscription value")

    user = User.update_fields(current_user.id, subscription=body.subscription)
    if not user:
        raise NotFoundError("User not found")
    return StatusEnvelope(data=UserProfile(**user.to_profile()))


@router.patch("/avatars", response_model=StatusEnvelope)
def update_avatar(
    avatar: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
) -> StatusEnvelope:
    try:
        temp_path = receive_upload(avatar)
    except ValueError as exc:
        raise ValidationError(str(exc))
    avatar_url = publish_avatar(temp_path)

    user = User.update_fields(current_user.id, avatar_url=avatar_url)
    if not user:
        raise NotFoundError("User not found")
    return StatusEnvelope(data=UserProfile(**user.to_profile()))

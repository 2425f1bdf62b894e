"""User account use cases: registration, login, profile and token refresh."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from stockroom.application.dto.requests import (
    UPDATABLE_PROFILE_FIELDS,
    LoginRequest,
    RegisterRequest,
    UpdateProfileRequest,
)
from stockroom.application.dto.responses import AuthResponse, UserResponse
from stockroom.application.validation import (
    validate_email,
    validate_password,
    validate_username,
    validation_error_from,
)
from stockroom.config import get_logger
from stockroom.core.entities.actor import ActorContext
from stockroom.core.entities.user import User, UserPreferences
from stockroom.core.exceptions import (
    AuthError,
    ConflictError,
    UserNotFoundError,
    ValidationError,
)
from stockroom.core.interfaces.user_store import IUserStore
from stockroom.core.security import (
    actor_from_token,
    create_access_token,
    hash_password,
    verify_password,
)

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid username/email or password"


@dataclass
class AuthResult:
    """A user together with a freshly issued token."""

    user: User
    token: str

    def to_response(self) -> AuthResponse:
        return AuthResponse(user=UserResponse.from_entity(self.user), token=self.token)


def issue_token(user: User) -> str:
    return create_access_token(user.id, user.username, user.role)  # type: ignore[arg-type]


def merge_preferences(current: UserPreferences, updates: dict[str, Any]) -> UserPreferences:
    """Overlay provided preference keys on the stored ones. Nulls are ignored."""
    merged = current.model_dump()
    for key, value in updates.items():
        if value is None:
            continue
        if key == "notifications" and isinstance(value, dict):
            merged["notifications"] = {
                **merged["notifications"],
                **{k: v for k, v in value.items() if v is not None},
            }
        else:
            merged[key] = value
    try:
        return UserPreferences.model_validate(merged)
    except PydanticValidationError as e:
        raise validation_error_from(e) from e


class _UserStoreMixin:
    _user_store: IUserStore | None

    async def _get_user_store(self) -> IUserStore:
        if self._user_store is None:
            from stockroom.infrastructure.storage.sqlite import get_user_store

            self._user_store = await get_user_store()
        return self._user_store


class RegisterUserUseCase(_UserStoreMixin):
    """Create an account and log it in."""

    def __init__(self, user_store: IUserStore | None = None):
        self._user_store = user_store

    async def execute(self, request: RegisterRequest) -> AuthResult:
        username = validate_username(request.username)
        email = validate_email(request.email)
        password = validate_password(request.password)

        store = await self._get_user_store()
        if await store.get_by_username(username) or await store.get_by_email(email):
            raise ConflictError("Username or email already in use")

        user = await store.create_user(
            User(
                username=username,
                email=email,
                password_hash=hash_password(password),
                first_name=request.first_name,
                last_name=request.last_name,
            )
        )
        logger.info("user_registered", user_id=user.id, username=user.username)
        return AuthResult(user=user, token=issue_token(user))


class LoginUserUseCase(_UserStoreMixin):
    """Authenticate by username or email."""

    def __init__(self, user_store: IUserStore | None = None):
        self._user_store = user_store

    async def execute(self, request: LoginRequest) -> AuthResult:
        store = await self._get_user_store()
        user = await store.get_by_identifier(request.identifier.strip())

        if user is None or not verify_password(request.password, user.password_hash):
            logger.info("login_failed", identifier=request.identifier)
            raise AuthError(INVALID_CREDENTIALS, reason="invalid_credentials")

        user.last_login = datetime.now(UTC)
        user = await store.update_user(user)
        logger.info("login_succeeded", user_id=user.id)
        return AuthResult(user=user, token=issue_token(user))


class GetProfileUseCase(_UserStoreMixin):
    """Load the acting user's own account."""

    def __init__(self, user_store: IUserStore | None = None):
        self._user_store = user_store

    async def execute(self, actor: ActorContext) -> User:
        user = await (await self._get_user_store()).get_user(actor.user_id)
        if user is None:
            raise UserNotFoundError(actor.user_id)
        return user


class UpdateProfileUseCase(_UserStoreMixin):
    """
    Patch the acting user's profile and issue a fresh token.

    ``preferences`` are merged key by key. A new ``password`` requires the
    correct ``current_password``.
    """

    def __init__(self, user_store: IUserStore | None = None):
        self._user_store = user_store

    async def execute(self, actor: ActorContext, payload: dict[str, Any]) -> AuthResult:
        if not isinstance(payload, dict):
            raise ValidationError("body", "Expected an object")

        invalid = sorted(set(payload) - UPDATABLE_PROFILE_FIELDS)
        if invalid:
            raise ValidationError(invalid[0], f"Invalid updates: {', '.join(invalid)}")

        try:
            request = UpdateProfileRequest.model_validate(payload)
        except PydanticValidationError as e:
            raise validation_error_from(e) from e

        store = await self._get_user_store()
        user = await store.get_user(actor.user_id)
        if user is None:
            raise UserNotFoundError(actor.user_id)

        if request.password is not None:
            if not request.current_password:
                raise ValidationError("current_password", "Current password is required")
            if not verify_password(request.current_password, user.password_hash):
                raise ValidationError("current_password", "Current password is incorrect")
            user.password_hash = hash_password(validate_password(request.password))

        if request.preferences is not None:
            user.preferences = merge_preferences(user.preferences, request.preferences)

        if "first_name" in request.model_fields_set:
            user.first_name = request.first_name
        if "last_name" in request.model_fields_set:
            user.last_name = request.last_name
        if request.email is not None:
            user.email = validate_email(request.email)
        if request.username is not None:
            user.username = validate_username(request.username)

        user = await store.update_user(user)
        logger.info(
            "profile_updated",
            user_id=user.id,
            fields=sorted(request.model_fields_set - {"password", "current_password"}),
            password_changed=request.password is not None,
        )
        return AuthResult(user=user, token=issue_token(user))


class RefreshTokenUseCase(_UserStoreMixin):
    """Exchange a valid, unexpired token for a new one."""

    def __init__(self, user_store: IUserStore | None = None):
        self._user_store = user_store

    async def execute(self, token: str) -> str:
        actor = actor_from_token(token)
        user = await (await self._get_user_store()).get_user(actor.user_id)
        if user is None:
            raise AuthError("Invalid or expired token", reason="unknown_user")
        return issue_token(user)

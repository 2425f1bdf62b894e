"""User account and authentication endpoints."""

from typing import Any

from fastapi import APIRouter, Body, Depends, status

from stockroom.api.dependencies import (
    get_current_actor,
    get_login_user_use_case,
    get_profile_use_case,
    get_refresh_token_use_case,
    get_register_user_use_case,
    get_update_profile_use_case,
    get_users_store,
)
from stockroom.application.dto.requests import (
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
)
from stockroom.application.dto.responses import (
    AuthResponse,
    ErrorResponse,
    TokenResponse,
    UserResponse,
)
from stockroom.application.use_cases import (
    GetProfileUseCase,
    LoginUserUseCase,
    RefreshTokenUseCase,
    RegisterUserUseCase,
    UpdateProfileUseCase,
)
from stockroom.core.entities.actor import ActorContext
from stockroom.core.exceptions import UserNotFoundError
from stockroom.infrastructure.storage.sqlite import SQLiteUserStore

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def register(
    request: RegisterRequest,
    use_case: RegisterUserUseCase = Depends(get_register_user_use_case),
) -> AuthResponse:
    """Create an account and return it with a token."""
    result = await use_case.execute(request)
    return result.to_response()


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"model": ErrorResponse}},
)
async def login(
    request: LoginRequest,
    use_case: LoginUserUseCase = Depends(get_login_user_use_case),
) -> AuthResponse:
    """Log in with username or email."""
    result = await use_case.execute(request)
    return result.to_response()


@router.post(
    "/refresh-token",
    response_model=TokenResponse,
    responses={401: {"model": ErrorResponse}},
)
async def refresh_token(
    request: RefreshTokenRequest,
    use_case: RefreshTokenUseCase = Depends(get_refresh_token_use_case),
) -> TokenResponse:
    """Exchange a valid token for a fresh one."""
    return TokenResponse(token=await use_case.execute(request.token))


@router.get(
    "/profile",
    response_model=UserResponse,
    responses={401: {"model": ErrorResponse}},
)
async def get_profile(
    actor: ActorContext = Depends(get_current_actor),
    use_case: GetProfileUseCase = Depends(get_profile_use_case),
) -> UserResponse:
    user = await use_case.execute(actor)
    return UserResponse.from_entity(user)


@router.patch(
    "/profile",
    response_model=AuthResponse,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_profile(
    payload: dict[str, Any] = Body(...),
    actor: ActorContext = Depends(get_current_actor),
    use_case: UpdateProfileUseCase = Depends(get_update_profile_use_case),
) -> AuthResponse:
    """Update the caller's profile. Returns a fresh token."""
    result = await use_case.execute(actor, payload)
    return result.to_response()


@router.get(
    "/email/{email}",
    response_model=UserResponse,
    dependencies=[Depends(get_current_actor)],
    responses={404: {"model": ErrorResponse}},
)
async def get_user_by_email(
    email: str,
    store: SQLiteUserStore = Depends(get_users_store),
) -> UserResponse:
    user = await store.get_by_email(email)
    if user is None:
        raise UserNotFoundError(email)
    return UserResponse.from_entity(user)


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    dependencies=[Depends(get_current_actor)],
    responses={404: {"model": ErrorResponse}},
)
async def get_user(
    user_id: int,
    store: SQLiteUserStore = Depends(get_users_store),
) -> UserResponse:
    user = await store.get_user(user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return UserResponse.from_entity(user)

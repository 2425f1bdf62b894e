"""Tests for user account use cases."""

from unittest.mock import AsyncMock

import pytest

from stockroom.application.dto.requests import LoginRequest, RegisterRequest
from stockroom.application.use_cases import (
    GetProfileUseCase,
    LoginUserUseCase,
    RefreshTokenUseCase,
    RegisterUserUseCase,
    UpdateProfileUseCase,
)
from stockroom.application.use_cases.manage_users import INVALID_CREDENTIALS, merge_preferences
from stockroom.core.entities import ActorContext, User, UserPreferences
from stockroom.core.exceptions import (
    AuthError,
    ConflictError,
    UserNotFoundError,
    ValidationError,
)
from stockroom.core.security import actor_from_token, create_access_token, hash_password, verify_password

PASSWORD = "Secret12!"
ACTOR = ActorContext(user_id=1, username="alice")


def make_user(**fields) -> User:
    data = {
        "id": 1,
        "username": "alice",
        "email": "alice@example.com",
        "password_hash": hash_password(PASSWORD),
    }
    data.update(fields)
    return User(**data)


@pytest.fixture
def mock_user_store():
    store = AsyncMock()
    store.get_by_username.return_value = None
    store.get_by_email.return_value = None
    store.create_user.side_effect = lambda user: user.model_copy(update={"id": 1})
    store.update_user.side_effect = lambda user: user
    return store


class TestRegisterUserUseCase:
    async def test_registers_and_issues_token(self, mock_user_store):
        result = await RegisterUserUseCase(mock_user_store).execute(
            RegisterRequest(username="alice", email=" alice@example.com ", password=PASSWORD)
        )

        assert result.user.email == "alice@example.com"
        assert verify_password(PASSWORD, result.user.password_hash)
        assert actor_from_token(result.token).user_id == 1
        assert "password_hash" not in result.to_response().user.model_dump()

    @pytest.mark.parametrize(
        ("fields", "bad_field"),
        [
            ({"username": "al"}, "username"),
            ({"username": "al ice"}, "username"),
            ({"email": "not-an-email"}, "email"),
            ({"password": "short1!"}, "password"),
            ({"password": "nodigits!!"}, "password"),
            ({"password": "NoSymbol123"}, "password"),
        ],
    )
    async def test_validation(self, mock_user_store, fields, bad_field):
        data = {"username": "alice", "email": "alice@example.com", "password": PASSWORD}
        data.update(fields)
        with pytest.raises(ValidationError) as exc_info:
            await RegisterUserUseCase(mock_user_store).execute(RegisterRequest(**data))
        assert exc_info.value.details["field"] == bad_field

    async def test_password_is_not_echoed(self, mock_user_store):
        with pytest.raises(ValidationError) as exc_info:
            await RegisterUserUseCase(mock_user_store).execute(
                RegisterRequest(username="alice", email="a@example.com", password="hunter2")
            )
        assert exc_info.value.details["value"] is None

    async def test_duplicate_rejected(self, mock_user_store):
        mock_user_store.get_by_email.return_value = make_user()
        with pytest.raises(ConflictError):
            await RegisterUserUseCase(mock_user_store).execute(
                RegisterRequest(username="alice2", email="alice@example.com", password=PASSWORD)
            )
        mock_user_store.create_user.assert_not_awaited()


class TestLoginUserUseCase:
    async def test_login_sets_last_login(self, mock_user_store):
        mock_user_store.get_by_identifier.return_value = make_user()

        result = await LoginUserUseCase(mock_user_store).execute(
            LoginRequest(identifier="alice", password=PASSWORD)
        )

        assert result.user.last_login is not None
        mock_user_store.update_user.assert_awaited_once()

    @pytest.mark.parametrize("found", [True, False])
    async def test_bad_credentials_share_one_message(self, mock_user_store, found):
        mock_user_store.get_by_identifier.return_value = make_user() if found else None

        with pytest.raises(AuthError) as exc_info:
            await LoginUserUseCase(mock_user_store).execute(
                LoginRequest(identifier="alice", password="Wrong123!")
            )
        assert exc_info.value.message == INVALID_CREDENTIALS


class TestProfileUseCases:
    async def test_get_profile(self, mock_user_store):
        mock_user_store.get_user.return_value = make_user()
        assert (await GetProfileUseCase(mock_user_store).execute(ACTOR)).username == "alice"

    async def test_get_profile_missing(self, mock_user_store):
        mock_user_store.get_user.return_value = None
        with pytest.raises(UserNotFoundError):
            await GetProfileUseCase(mock_user_store).execute(ACTOR)

    async def test_update_names_and_preferences(self, mock_user_store):
        mock_user_store.get_user.return_value = make_user(first_name="Al")

        result = await UpdateProfileUseCase(mock_user_store).execute(
            ACTOR,
            {"last_name": "Smith", "preferences": {"theme": "dark", "notifications": {"email": False}}},
        )

        assert result.user.first_name == "Al"
        assert result.user.last_name == "Smith"
        assert result.user.preferences.theme == "dark"
        assert result.user.preferences.notifications.email is False
        assert result.user.preferences.notifications.low_stock is True
        assert result.token

    async def test_password_change_requires_current_password(self, mock_user_store):
        mock_user_store.get_user.return_value = make_user()
        use_case = UpdateProfileUseCase(mock_user_store)

        with pytest.raises(ValidationError, match="required"):
            await use_case.execute(ACTOR, {"password": "Newpass1!"})
        with pytest.raises(ValidationError, match="incorrect"):
            await use_case.execute(ACTOR, {"password": "Newpass1!", "current_password": "nope"})

        result = await use_case.execute(
            ACTOR, {"password": "Newpass1!", "current_password": PASSWORD}
        )
        assert verify_password("Newpass1!", result.user.password_hash)

    async def test_unknown_fields_rejected(self, mock_user_store):
        with pytest.raises(ValidationError):
            await UpdateProfileUseCase(mock_user_store).execute(ACTOR, {"role": "admin"})


class TestMergePreferences:
    def test_nulls_are_ignored(self):
        merged = merge_preferences(UserPreferences(theme="light"), {"theme": None, "language": "fr"})
        assert merged.theme == "light"
        assert merged.language == "fr"

    def test_invalid_value_is_validation_error(self):
        with pytest.raises(ValidationError):
            merge_preferences(UserPreferences(), {"dashboard_layout": "huge"})


class TestRefreshTokenUseCase:
    async def test_issues_new_token(self, mock_user_store):
        mock_user_store.get_user.return_value = make_user()
        token = await RefreshTokenUseCase(mock_user_store).execute(create_access_token(1, "alice"))
        assert actor_from_token(token).username == "alice"

    async def test_unknown_user(self, mock_user_store):
        mock_user_store.get_user.return_value = None
        with pytest.raises(AuthError):
            await RefreshTokenUseCase(mock_user_store).execute(create_access_token(1, "alice"))

    async def test_invalid_token(self, mock_user_store):
        with pytest.raises(AuthError):
            await RefreshTokenUseCase(mock_user_store).execute("garbage")

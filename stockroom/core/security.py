"""Security utilities for authentication.

Passwords are stored as salted PBKDF2-HMAC-SHA256 digests. Access tokens
are ``<payload>.<signature>``: a base64url JSON payload signed with
HMAC-SHA256 under the configured secret key.
"""

import base64
import hashlib
import hmac
import json
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

from stockroom.config import get_settings
from stockroom.core.entities.actor import ActorContext
from stockroom.core.entities.user import UserRole
from stockroom.core.exceptions import AuthError

_HASH_SCHEME = "pbkdf2_sha256"


def hash_password(password: str, iterations: int | None = None) -> str:
    """Hash a password with a random salt."""
    iterations = iterations or get_settings().auth.password_iterations
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode(), salt.encode(), iterations
    ).hex()
    return f"{_HASH_SCHEME}${iterations}${salt}${digest}"


def verify_password(password: str, encoded: str) -> bool:
    """Check a password against an encoded hash."""
    try:
        scheme, iterations, salt, digest = encoded.split("$")
        rounds = int(iterations)
    except ValueError:
        return False
    if scheme != _HASH_SCHEME:
        return False
    candidate = hashlib.pbkdf2_hmac(
        "sha256", password.encode(), salt.encode(), rounds
    ).hex()
    return hmac.compare_digest(candidate, digest)


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def _b64decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(payload_b64: str) -> str:
    key = get_settings().auth.secret_key.encode()
    return _b64encode(hmac.new(key, payload_b64.encode(), hashlib.sha256).digest())


def create_access_token(
    user_id: int,
    username: str,
    role: UserRole = UserRole.USER,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed access token for a user."""
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=get_settings().auth.token_expire_minutes)
    )
    payload = {
        "sub": user_id,
        "username": username,
        "role": role.value,
        "exp": int(expire.timestamp()),
    }
    payload_b64 = _b64encode(json.dumps(payload, separators=(",", ":")).encode())
    return f"{payload_b64}.{_sign(payload_b64)}"


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify a token and return its payload.

    Raises:
        AuthError: malformed, tampered or expired token
    """
    try:
        payload_b64, signature = token.split(".")
    except ValueError as e:
        raise AuthError(reason="malformed_token") from e

    if not hmac.compare_digest(signature, _sign(payload_b64)):
        raise AuthError(reason="invalid_signature")

    try:
        payload = json.loads(_b64decode(payload_b64))
    except (ValueError, UnicodeDecodeError) as e:
        raise AuthError(reason="malformed_token") from e
    if not isinstance(payload, dict):
        raise AuthError(reason="malformed_token")

    if payload.get("exp", 0) < datetime.now(UTC).timestamp():
        raise AuthError("Token has expired", reason="token_expired")

    return payload


def actor_from_token(token: str) -> ActorContext:
    """Resolve a bearer token into the request's actor."""
    payload = decode_access_token(token)
    try:
        return ActorContext(
            user_id=int(payload["sub"]),
            username=str(payload["username"]),
            role=UserRole(payload.get("role", UserRole.USER.value)),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise AuthError(reason="malformed_token") from e

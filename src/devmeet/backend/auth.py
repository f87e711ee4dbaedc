"""Authentication utilities

Credential hashing, access tokens and the random secrets handed out by the
signup and password-reset flows.
"""
import hashlib
import secrets
import string
from datetime import datetime, timedelta, timezone
from typing import Any
from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession
from .config import settings
from .exceptions import AuthenticationError
from .logger import get_logger

logger = get_logger(__name__)

# bcrypt only reads the first 72 bytes, so secrets are pre-hashed to a fixed 64 hex chars
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def _prehash(password: str) -> bytes:
    return hashlib.sha256(password.encode("utf-8")).hexdigest().encode("ascii")


def get_password_hash(password: str) -> str:
    """Hash a credential for storage

    Pending signups hash at signup time, so the plaintext never reaches the
    accounts table.
    """
    return pwd_context.hash(_prehash(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plaintext credential against its stored hash

    Args:
        plain_password: Credential supplied by the user
        hashed_password: Stored bcrypt hash

    Returns:
        True on match
    """
    return pwd_context.verify(_prehash(plain_password), hashed_password)


def generate_passcode(length: int | None = None) -> str:
    """Generate a numeric one-time passcode"""
    length = length or settings.otp_length
    return "".join(secrets.choice(string.digits) for _ in range(length))


def secrets_match(expected: str, supplied: str) -> bool:
    """Constant-time comparison of a stored secret with user input

    Compared as UTF-8 bytes; ``compare_digest`` rejects non-ASCII str.
    """
    return secrets.compare_digest(expected.encode("utf-8"), supplied.encode("utf-8"))


def generate_reset_token() -> str:
    """Generate a password reset token (64 hex chars)"""
    return secrets.token_hex(32)


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Issue a signed session token

    Args:
        data: Claims to embed; ``sub`` carries the account id
        expires_delta: Lifetime (defaults to ``access_token_expire_minutes``)

    Returns:
        Encoded JWT
    """
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims = {**data, "iat": issued_at, "exp": issued_at + lifetime}

    token = jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)
    logger.debug(f"Issued access token for account {data.get('sub')}")
    return token


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Verify signature and expiry of a session token

    Returns:
        Claims, or None when the token is malformed, forged or expired
    """
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as e:
        logger.debug(f"Rejected access token: {e}")
        return None


async def get_user_from_token(token: str, db: AsyncSession):
    """Resolve a bearer token to a live, verified account

    Shared by the HTTP dependency and the WebSocket endpoint.

    Args:
        token: JWT token string
        db: Database session

    Returns:
        User object

    Raises:
        AuthenticationError: If token is invalid or user not found
    """
    from .models.user import User
    from .utils.query import get_active_query

    payload = decode_access_token(token)
    if not payload:
        raise AuthenticationError("Invalid authentication credentials")

    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid token payload")

    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid token payload")

    result = await db.execute(
        get_active_query(User).where(User.id == user_id)
    )
    user = result.scalar_one_or_none()

    if not user:
        raise AuthenticationError("User not found")

    if not user.is_email_verified:
        raise AuthenticationError("Email not verified")

    logger.debug(f"Authenticated user: {user.email} (ID: {user.id})")
    return user

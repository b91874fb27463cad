"""
JWT Authentication for the task list API

Provides password hashing, JWT token generation/verification and the
per-request session resolution that maps a bearer token to a User document.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
import os

import bcrypt
from jose import JWTError, jwt

from src.core.document_store import USERS, DocumentStore, InvalidDocumentId, to_object_id
from src.utils.logger import get_logger

logger = get_logger(__name__)

# JWT Configuration
SECRET_KEY = os.getenv("JWT_SECRET", "your-secret-key-change-this-in-production")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_DAYS = 7


class InvalidTokenError(Exception):
    """Token is malformed, tampered with, expired or carries no user id"""


def hash_password(password: str) -> str:
    """One-way salted hash; a fresh salt is drawn on every call"""
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')


def verify_password(password: str, hashed_password: str) -> bool:
    """
    Check a plain password against a stored bcrypt hash.

    Returns False (never raises) for a hash that is not valid bcrypt.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), hashed_password.encode('utf-8'))
    except (ValueError, TypeError, AttributeError) as e:
        logger.warning(f"⚠️  Stored password hash could not be checked: {e}")
        return False


def create_access_token(
    user_id: str,
    expires_delta: Optional[timedelta] = None,
    secret_key: Optional[str] = None
) -> str:
    """
    Create JWT access token for a user

    Args:
        user_id: Store id of the user (string form)
        expires_delta: Token lifetime (default: 7 days)
        secret_key: Signing key override (defaults to JWT_SECRET)

    Returns:
        JWT token string carrying {id, exp}
    """
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(days=ACCESS_TOKEN_EXPIRE_DAYS))
    to_encode = {"id": str(user_id), "exp": expire}

    encoded_jwt = jwt.encode(to_encode, secret_key or SECRET_KEY, algorithm=ALGORITHM)

    logger.debug(f"🔑 JWT token created for user {user_id} (expires: {expire})")

    return encoded_jwt


def verify_token(token: str, secret_key: Optional[str] = None) -> Dict[str, Any]:
    """
    Verify and decode JWT token

    Args:
        token: JWT token string
        secret_key: Verification key override (defaults to JWT_SECRET)

    Returns:
        Decoded payload; only `id` is meant to be relied upon

    Raises:
        InvalidTokenError: If token is invalid, expired or has no id
    """
    try:
        payload = jwt.decode(token, secret_key or SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        raise InvalidTokenError(str(e)) from e

    if not payload.get("id"):
        raise InvalidTokenError("Token carries no user id")

    return payload


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Accept either 'Bearer <token>' or a bare token in the Authorization header"""
    if not authorization:
        return None

    value = authorization.strip()
    scheme, _, credentials = value.partition(" ")
    if scheme.lower() == "bearer":
        value = credentials.strip()

    return value or None


async def get_user_from_token(
    token: Optional[str],
    store: DocumentStore,
    secret_key: Optional[str] = None
) -> Optional[Dict[str, Any]]:
    """
    Resolve the session user for one request.

    Returns the User document, or None (anonymous) when the token is
    missing, invalid, expired, or names a user that does not exist.
    Never raises for a bad token; handlers decide whether anonymity is
    acceptable.
    """
    if not token:
        return None

    try:
        payload = verify_token(token, secret_key)
        user_id = to_object_id(payload["id"])
    except (InvalidTokenError, InvalidDocumentId) as e:
        logger.debug(f"Anonymous session: {e}")
        return None

    user = await store.find_by_id(USERS, user_id)
    if user is None:
        logger.warning(f"⚠️  Token for unknown user {user_id}")

    return user

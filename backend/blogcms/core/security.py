"""
Token Service and password hashing.

Tokens are HS256 JWTs with a fixed lifetime and no refresh mechanism.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
import logging
import uuid

import bcrypt
from jose import jwt, JWTError, ExpiredSignatureError

from blogcms.core.config import settings
from blogcms.core.errors import AuthenticationError

logger = logging.getLogger(__name__)

TOKEN_TYPE = "access"

# bcrypt only looks at the first 72 bytes of a secret
_BCRYPT_MAX_BYTES = 72


def _secret_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Return a salted one-way bcrypt hash of ``password``."""
    salt = bcrypt.gensalt(rounds=settings.PASSWORD_HASH_ROUNDS)
    return bcrypt.hashpw(_secret_bytes(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(_secret_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


# Compared against when the email is unknown so both login failures cost the same
DUMMY_PASSWORD_HASH = hash_password(uuid.uuid4().hex)


def issue_token(
    user_id: str,
    is_admin: bool,
    email: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a signed, expiring access token for an identity.

    Args:
        user_id: Identifier stored in the ``sub`` claim
        is_admin: Admin flag carried in the token
        email: Optional email claim for display purposes
        expires_delta: Override of the configured lifetime

    Returns:
        Encoded JWT
    """
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(days=settings.TOKEN_EXPIRE_DAYS)

    claims: Dict[str, Any] = {
        "sub": str(user_id),
        "is_admin": bool(is_admin),
        "iat": now,
        "exp": now + expires_delta,
        "jti": str(uuid.uuid4()),
        "type": TOKEN_TYPE,
    }
    if email:
        claims["email"] = email

    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.TOKEN_ALGORITHM)


def verify_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a token.

    Raises:
        AuthenticationError: If the token is malformed, forged, expired or of the wrong type
    """
    if not token:
        raise AuthenticationError("Token is empty")

    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.TOKEN_ALGORITHM]
        )
    except ExpiredSignatureError:
        logger.info("Rejected expired token")
        raise AuthenticationError("Token has expired")
    except JWTError as e:
        logger.info(f"Rejected invalid token: {e}")
        raise AuthenticationError("Could not validate credentials")

    if payload.get("type") != TOKEN_TYPE:
        raise AuthenticationError("Invalid token type")
    if not payload.get("sub"):
        raise AuthenticationError("Token has no subject")

    return payload

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from blogcms.core.database import get_db
from blogcms.core.errors import AuthenticationError, PermissionDeniedError
from blogcms.core.logging_config import log_security_event
from blogcms.core.security import verify_token
from blogcms.models.user import User
from blogcms.services.credentials import CredentialStore
from typing import Optional
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

NO_TOKEN = "Not authorized, no token"
TOKEN_FAILED = "Not authorized, token failed"


def authenticate_request(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
    db: Session,
) -> User:
    """
    Resolve the bearer token on a request to a live user record.

    Every failure after the token is found reports the same message, so
    callers cannot tell a forged token from an expired one or a removed user.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError(NO_TOKEN)

    try:
        payload = verify_token(credentials.credentials)
    except AuthenticationError as e:
        log_security_event(
            event_type="auth.token.rejected",
            message="Bearer token rejected",
            level=logging.WARNING,
            request=request,
            event_category="authentication",
            reason=e.message,
        )
        raise AuthenticationError(TOKEN_FAILED)

    user = CredentialStore(db).get_user(payload["sub"])
    if user is None or not user.is_active:
        log_security_event(
            event_type="auth.token.unknown_user",
            message="Token subject does not resolve to an active user",
            level=logging.WARNING,
            user_id=payload["sub"],
            request=request,
            event_category="authentication",
        )
        raise AuthenticationError(TOKEN_FAILED)

    request.state.user = user
    return user


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get the current authenticated user from the Authorization header."""
    return authenticate_request(request, credentials, db)


async def get_current_user_optional(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Get the current user if a valid token was sent, otherwise return None."""
    if credentials is None:
        return None

    try:
        return authenticate_request(request, credentials, db)
    except AuthenticationError:
        return None


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise PermissionDeniedError()
    return current_user

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from blogcms.core.auth import get_current_user
from blogcms.core.config import settings
from blogcms.core.database import get_db
from blogcms.core.errors import AuthenticationError, ValidationError
from blogcms.core.logging_config import log_security_event
from blogcms.core.rate_limit import limiter
from blogcms.models.user import User
from blogcms.schemas.auth import AuthResponse, Credentials, Identity
from blogcms.services.credentials import AuthSession, CredentialStore, normalize_email
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


def _auth_response(session: AuthSession) -> AuthResponse:
    return AuthResponse(token=session.token, email=session.email, is_admin=session.is_admin)


@router.post("/register", response_model=AuthResponse, status_code=201)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def register(request: Request, payload: Credentials, db: Session = Depends(get_db)):
    """Create an account and return a token for it."""
    try:
        session = CredentialStore(db).register(payload.email, payload.password)
    except ValidationError as e:
        log_security_event(
            event_type="auth.register.rejected",
            message=f"Registration rejected: {e.message}",
            level=logging.WARNING,
            email=normalize_email(payload.email),
            request=request,
            event_category="authentication",
        )
        raise

    log_security_event(
        event_type="auth.register.success",
        message="User registered",
        user_id=session.user.id,
        email=session.email,
        request=request,
        event_category="authentication",
        is_admin=session.is_admin,
    )
    return _auth_response(session)


@router.post("/login", response_model=AuthResponse)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def login(request: Request, payload: Credentials, db: Session = Depends(get_db)):
    """Exchange email and password for a token."""
    try:
        session = CredentialStore(db).login(payload.email, payload.password)
    except AuthenticationError:
        log_security_event(
            event_type="auth.login.failure",
            message="Login failed",
            level=logging.WARNING,
            email=normalize_email(payload.email),
            request=request,
            event_category="authentication",
        )
        raise

    log_security_event(
        event_type="auth.login.success",
        message="User logged in",
        user_id=session.user.id,
        email=session.email,
        request=request,
        event_category="authentication",
    )
    return _auth_response(session)


@router.get("/me", response_model=Identity)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current user information."""
    return Identity(id=current_user.id, email=current_user.email, is_admin=current_user.is_admin)

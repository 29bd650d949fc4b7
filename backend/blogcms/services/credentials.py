"""Credential Store: user accounts, registration gate and login."""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from blogcms.core.config import settings
from blogcms.core.errors import AuthenticationError, ValidationError
from blogcms.core.security import (
    DUMMY_PASSWORD_HASH,
    hash_password,
    issue_token,
    verify_password,
)
from blogcms.core.utils import utcnow
from blogcms.models.user import User

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s.]+$")


class FirstAccountClaimed(Exception):
    """Another registration committed the first (admin) account first."""


@dataclass
class AuthSession:
    """A freshly issued token and the account it belongs to."""

    token: str
    user: User

    @property
    def email(self) -> str:
        return self.user.email

    @property
    def is_admin(self) -> bool:
        return bool(self.user.is_admin)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def issue_session(user: User) -> AuthSession:
    return AuthSession(
        token=issue_token(user.id, is_admin=user.is_admin, email=user.email),
        user=user,
    )


class CredentialStore:
    """Persisted user records with hashed secrets."""

    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: str) -> Optional[User]:
        if not user_id:
            return None
        return self.db.query(User).filter(User.id == str(user_id)).first()

    def get_user_by_email(self, email: str) -> Optional[User]:
        normalized = normalize_email(email)
        if not normalized:
            return None
        return self.db.query(User).filter(User.email == normalized).first()

    def has_users(self) -> bool:
        return self.db.query(User.id).first() is not None

    def create_user(
        self, email: str, password: str, is_admin: bool = False, bootstrap: bool = False
    ) -> User:
        """
        Validate and store a new account, bypassing the registration gate.

        Raises:
            ValidationError: If the email is malformed or taken, or the password is too short
            FirstAccountClaimed: If ``bootstrap`` is set and another account already
                holds the first-admin marker
        """
        normalized = normalize_email(email)
        if not _EMAIL_PATTERN.match(normalized):
            raise ValidationError("Please provide a valid email address")
        if len(password or "") < settings.PASSWORD_MIN_LENGTH:
            raise ValidationError(
                f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters"
            )
        if self.get_user_by_email(normalized) is not None:
            raise ValidationError("Email already registered")

        user = User(
            email=normalized,
            password_hash=hash_password(password),
            is_admin=is_admin,
            is_active=True,
            bootstrap_admin=True if bootstrap else None,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration
            self.db.rollback()
            if bootstrap and self.get_user_by_email(normalized) is None:
                raise FirstAccountClaimed()
            raise ValidationError("Email already registered")
        self.db.refresh(user)

        logger.info(f"Created user {user.id} (admin={user.is_admin})")
        return user

    def register(self, email: str, password: str) -> AuthSession:
        """
        Register an account and issue a token for it.

        The first account ever created is the admin. Afterwards registration
        only accepts emails listed in ADMIN_EMAILS, unless REGISTRATION_OPEN
        is set, in which case other accounts are created without admin rights.
        Only one account can hold the first-admin marker, so two registrations
        racing on an empty store produce a single admin.
        """
        normalized = normalize_email(email)
        first_account = not self.has_users()
        flagged_admin = normalized in settings.ADMIN_EMAILS

        if not (first_account or flagged_admin or settings.REGISTRATION_OPEN):
            raise ValidationError("Registration is closed")

        try:
            user = self.create_user(
                normalized,
                password,
                is_admin=first_account or flagged_admin,
                bootstrap=first_account,
            )
        except FirstAccountClaimed:
            logger.warning(f"First-account registration for {normalized} lost to another")
            if not (flagged_admin or settings.REGISTRATION_OPEN):
                raise ValidationError("Registration is closed")
            user = self.create_user(normalized, password, is_admin=flagged_admin)

        return issue_session(user)

    def authenticate(self, email: str, password: str) -> User:
        """
        Check credentials without issuing a token.

        Unknown email, inactive account and wrong password are
        indistinguishable to the caller.
        """
        user = self.get_user_by_email(email)
        if user is None:
            verify_password(password or "", DUMMY_PASSWORD_HASH)
            raise AuthenticationError(INVALID_CREDENTIALS)

        if not verify_password(password or "", user.password_hash) or not user.is_active:
            raise AuthenticationError(INVALID_CREDENTIALS)

        return user

    def login(self, email: str, password: str) -> AuthSession:
        user = self.authenticate(email, password)
        user.last_login = utcnow()
        self.db.commit()
        self.db.refresh(user)
        return issue_session(user)

from sqlalchemy import Column, String, DateTime, Boolean
from blogcms.core.database import Base
from blogcms.core.utils import new_object_id, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(String(24), primary_key=True, default=new_object_id)

    # Stored lowercased so lookups are case-insensitive
    email = Column(String(320), unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)

    is_admin = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # True only on the account created as the first admin, NULL elsewhere; the
    # unique index lets a single registration claim it
    bootstrap_admin = Column(Boolean, nullable=True, unique=True)

    created_at = Column(DateTime, default=utcnow, index=True)
    last_login = Column(DateTime, nullable=True)

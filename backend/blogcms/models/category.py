from sqlalchemy import Column, String, DateTime, Text
from blogcms.core.database import Base
from blogcms.core.utils import new_object_id, utcnow


class Category(Base):
    __tablename__ = "categories"

    id = Column(String(24), primary_key=True, default=new_object_id)
    name = Column(String(200), unique=True, nullable=False, index=True)
    slug = Column(String(200), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

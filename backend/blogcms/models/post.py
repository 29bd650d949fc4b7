from sqlalchemy import Column, String, DateTime, Text, ForeignKey
from blogcms.core.database import Base
from blogcms.core.utils import new_object_id, utcnow


class Post(Base):
    __tablename__ = "posts"

    id = Column(String(24), primary_key=True, default=new_object_id)
    title = Column(String(500), nullable=False)
    slug = Column(String(500), unique=True, nullable=False, index=True)
    content = Column(Text, nullable=False)  # Rich HTML
    excerpt = Column(Text, nullable=True)
    image = Column(String, nullable=True)  # Featured image URL

    # Weak reference: no foreign key, deleting a category leaves this dangling
    category = Column(String(24), nullable=True, index=True)

    status = Column(String(20), nullable=False, default="draft", index=True)
    author = Column(String(24), ForeignKey("users.id"), nullable=True, index=True)

    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

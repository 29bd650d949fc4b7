from blogcms.schemas.auth import Credentials, Identity, AuthResponse
from blogcms.schemas.category import Category, CategoryCreate
from blogcms.schemas.post import Post, PostCreate, PostUpdate, Stats

__all__ = [
    "Credentials",
    "Identity",
    "AuthResponse",
    "Category",
    "CategoryCreate",
    "Post",
    "PostCreate",
    "PostUpdate",
    "Stats",
]

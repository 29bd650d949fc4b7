from .user import User
from .category import Category
from .post import Post

__all__ = [
    "User",
    "Category",
    "Post",
]

from pydantic import AliasChoices, BaseModel, Field
from datetime import datetime
from typing import Optional

# Clients send both the API names and the storage names for these two fields
_IMAGE = AliasChoices("featured_image", "image")
_CATEGORY = AliasChoices("category_id", "category")


class PostCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    content: str = Field(..., min_length=1)
    excerpt: Optional[str] = None
    slug: Optional[str] = Field(None, max_length=500)
    status: Optional[str] = None  # Defaults to draft
    featured_image: Optional[str] = Field(None, validation_alias=_IMAGE)
    category_id: Optional[str] = Field(None, validation_alias=_CATEGORY)


class PostUpdate(BaseModel):
    """Partial update. Absent or empty fields keep their stored value."""

    title: Optional[str] = Field(None, max_length=500)
    content: Optional[str] = None
    excerpt: Optional[str] = None
    slug: Optional[str] = Field(None, max_length=500)
    status: Optional[str] = None
    featured_image: Optional[str] = Field(None, validation_alias=_IMAGE)
    category_id: Optional[str] = Field(None, validation_alias=_CATEGORY)


class Post(BaseModel):
    id: str
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    category_id: Optional[str] = None
    category_name: str
    status: str
    featured_image: Optional[str] = None
    author_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class Stats(BaseModel):
    total: int
    published: int
    drafts: int
    categories: int

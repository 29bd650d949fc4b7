from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None


class CategoryCreate(CategoryBase):
    slug: Optional[str] = Field(None, max_length=200)


class Category(CategoryBase):
    id: str
    slug: str
    created_at: datetime

    class Config:
        from_attributes = True

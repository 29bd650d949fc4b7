from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from typing import List
from blogcms.core.auth import require_admin
from blogcms.core.database import get_db
from blogcms.core.logging_config import log_security_event
from blogcms.models.user import User
from blogcms.schemas.category import Category as CategorySchema, CategoryCreate
from blogcms.services.content import ContentRepository

router = APIRouter()


@router.get("", response_model=List[CategorySchema])
def get_categories(db: Session = Depends(get_db)):
    """Get all categories sorted by name."""
    return ContentRepository(db).list_categories()


@router.post("", response_model=CategorySchema, status_code=201)
def create_category(
    category: CategoryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    Create a category.

    The slug is derived from the name unless one is supplied. Name and slug
    must both be unused.
    """
    return ContentRepository(db).create_category(
        name=category.name, description=category.description, slug=category.slug
    )


@router.delete("/{category_id}")
def delete_category(
    category_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    Delete a category.

    Posts that referenced it are left untouched and read as uncategorized.
    """
    ContentRepository(db).delete_category(category_id)

    log_security_event(
        event_type="content.category.deleted",
        message="Category deleted",
        user_id=current_user.id,
        request=request,
        event_category="content",
        category_id=category_id,
    )
    return {"message": "Category removed"}

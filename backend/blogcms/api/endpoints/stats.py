from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from blogcms.core.auth import require_admin
from blogcms.core.database import get_db
from blogcms.models.user import User
from blogcms.schemas.post import Stats
from blogcms.services.content import ContentRepository

router = APIRouter()


@router.get("", response_model=Stats)
def get_stats(
    db: Session = Depends(get_db), current_user: User = Depends(require_admin)
):
    """Post and category counts for the admin dashboard."""
    return ContentRepository(db).stats()

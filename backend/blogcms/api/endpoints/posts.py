from fastapi import APIRouter, Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Dict, List, Optional
from blogcms.api.field_mapping import post_document, to_api, to_storage
from blogcms.core.auth import (
    authenticate_request,
    get_current_user_optional,
    require_admin,
    security,
)
from blogcms.core.database import get_db
from blogcms.core.errors import PermissionDeniedError
from blogcms.core.logging_config import log_security_event
from blogcms.models.post import Post
from blogcms.models.user import User
from blogcms.schemas.post import Post as PostSchema, PostCreate, PostUpdate
from blogcms.services.content import ContentRepository
from blogcms.services.publication import generate_excerpt, resolve_category_name

router = APIRouter()


def serialize_post(post: Post, categories: Dict[str, str]) -> dict:
    """API view of a post: renamed fields plus the resolved category name."""
    data = to_api(post_document(post))
    data["category_name"] = resolve_category_name(post.category, categories)
    if not data["excerpt"]:
        data["excerpt"] = generate_excerpt(post.content)
    return data


@router.get("", response_model=List[PostSchema])
def list_posts(
    request: Request,
    show_all: bool = Query(False, alias="all", description="Include drafts (admin only)"),
    category: Optional[str] = Query(None, max_length=24, description="Category ID filter"),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
):
    """
    List posts, newest first.

    Without ``all`` only published posts are returned. ``all=true`` is the
    administrative listing and requires an admin token.
    """
    if show_all:
        user = authenticate_request(request, credentials, db)
        if not user.is_admin:
            raise PermissionDeniedError()

    repo = ContentRepository(db)
    posts = repo.list_posts(include_drafts=show_all, category_id=category)
    categories = repo.category_names()
    return [serialize_post(post, categories) for post in posts]


@router.get("/{id_or_slug}", response_model=PostSchema)
def get_post(
    id_or_slug: str,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user_optional),
):
    """Get a post by identifier or slug. Drafts are only visible to admins."""
    repo = ContentRepository(db)
    include_drafts = bool(current_user and current_user.is_admin)
    post = repo.get_post(id_or_slug, include_drafts=include_drafts)
    return serialize_post(post, {post.category: repo.category_name_for(post)})


@router.post("", response_model=PostSchema, status_code=201)
def create_post(
    payload: PostCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Create a post. It stays a draft unless ``status`` is ``published``."""
    repo = ContentRepository(db)
    fields = to_storage(payload.model_dump(exclude_unset=True))
    post = repo.create_post(author=current_user, **fields)
    return serialize_post(post, {post.category: repo.category_name_for(post)})


@router.put("/{post_id}", response_model=PostSchema)
def update_post(
    post_id: str,
    payload: PostUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Partially update a post; absent or empty fields keep their values."""
    repo = ContentRepository(db)
    fields = to_storage(payload.model_dump(exclude_unset=True))
    post = repo.update_post(post_id, **fields)
    return serialize_post(post, {post.category: repo.category_name_for(post)})


@router.delete("/{post_id}")
def delete_post(
    post_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Permanently delete a post."""
    ContentRepository(db).delete_post(post_id)

    log_security_event(
        event_type="content.post.deleted",
        message="Post deleted",
        user_id=current_user.id,
        request=request,
        event_category="content",
        post_id=post_id,
    )
    return {"message": "Post removed"}

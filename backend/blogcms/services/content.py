"""
Content Repository: persisted posts and categories.

Slug and name uniqueness is checked before every write and enforced again by
the unique indexes; whichever catches a collision, callers get ConflictError.
Each public method is a single commit.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy import desc, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from blogcms.core.errors import ConflictError, NotFoundError, ValidationError
from blogcms.core.utils import is_object_id
from blogcms.models.category import Category
from blogcms.models.post import Post
from blogcms.models.user import User
from blogcms.services.publication import (
    PostStatus,
    is_visible,
    parse_status,
    resolve_category_name,
    resolve_slug,
)

logger = logging.getLogger(__name__)

# Fields a partial update may overwrite, in storage names
UPDATABLE_POST_FIELDS = ("title", "content", "excerpt", "image", "category", "status", "slug")


class ContentRepository:
    def __init__(self, db: Session):
        self.db = db

    # ---- persistence helpers ----

    def _commit(self, conflict_message: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Unique constraint rejected write: {e.orig}")
            raise ConflictError(conflict_message)

    def _post_slug_taken(self, slug: str, exclude_id: Optional[str] = None) -> bool:
        query = self.db.query(Post.id).filter(Post.slug == slug)
        if exclude_id:
            query = query.filter(Post.id != exclude_id)
        return query.first() is not None

    def _ensure_post_slug_available(self, slug: str, exclude_id: Optional[str] = None) -> None:
        if self._post_slug_taken(slug, exclude_id):
            raise ConflictError(f"A post with slug '{slug}' already exists")

    def _ensure_category_available(self, name: str, slug: str) -> None:
        clash = (
            self.db.query(Category)
            .filter((Category.name == name) | (Category.slug == slug))
            .first()
        )
        if clash is not None:
            raise ConflictError(
                f"A category named '{clash.name}' with slug '{clash.slug}' already exists"
            )

    def _ensure_category_exists(self, category_id: str) -> None:
        if self.get_category(category_id) is None:
            raise ValidationError(f"Category '{category_id}' does not exist")

    # ---- posts ----

    def create_post(
        self,
        author: User,
        title: str,
        content: str,
        excerpt: Optional[str] = None,
        image: Optional[str] = None,
        category: Optional[str] = None,
        status: Optional[str] = None,
        slug: Optional[str] = None,
    ) -> Post:
        """Create a post owned by ``author``. Status defaults to draft."""
        title = (title or "").strip()
        if not title:
            raise ValidationError("Title is required")
        if not content:
            raise ValidationError("Content is required")

        post_status = parse_status(status) if status else PostStatus.DRAFT
        post_slug = resolve_slug(slug, title)
        if category:
            self._ensure_category_exists(category)
        self._ensure_post_slug_available(post_slug)

        post = Post(
            title=title,
            slug=post_slug,
            content=content,
            excerpt=excerpt or None,
            image=image or None,
            category=category or None,
            status=post_status.value,
            author=author.id,
        )
        self.db.add(post)
        self._commit(f"A post with slug '{post_slug}' already exists")
        self.db.refresh(post)

        logger.info(f"Created post {post.id} ({post.slug}, {post.status})")
        return post

    def update_post(self, post_id: str, **fields) -> Post:
        """
        Apply a partial update.

        Only truthy values overwrite; anything absent, None or empty keeps
        the stored value. The author never changes.
        """
        unknown = set(fields) - set(UPDATABLE_POST_FIELDS)
        if unknown:
            raise ValidationError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        post = self.get_post_by_id(post_id)
        changes = {key: value for key, value in fields.items() if value}

        if "title" in changes:
            changes["title"] = changes["title"].strip()
            if not changes["title"]:
                del changes["title"]
        if "status" in changes:
            changes["status"] = parse_status(changes["status"]).value
        if "slug" in changes:
            changes["slug"] = resolve_slug(changes["slug"], post.title)
            self._ensure_post_slug_available(changes["slug"], exclude_id=post.id)
        if "category" in changes and changes["category"] != post.category:
            self._ensure_category_exists(changes["category"])

        for key, value in changes.items():
            setattr(post, key, value)

        self._commit(f"A post with slug '{post.slug}' already exists")
        self.db.refresh(post)

        logger.info(f"Updated post {post.id}: {', '.join(sorted(changes)) or 'no changes'}")
        return post

    def delete_post(self, post_id: str) -> None:
        post = self.get_post_by_id(post_id)
        self.db.delete(post)
        self.db.commit()
        logger.info(f"Deleted post {post_id}")

    def get_post_by_id(self, post_id: str) -> Post:
        post = None
        if is_object_id(post_id):
            post = self.db.query(Post).filter(Post.id == post_id.lower()).first()
        if post is None:
            raise NotFoundError("Post not found")
        return post

    def get_post(self, id_or_slug: str, include_drafts: bool = True) -> Post:
        """
        Fetch one post by identifier or slug.

        Inputs shaped like an identifier are looked up by id, everything else
        by slug. Drafts count as missing unless ``include_drafts``.
        """
        if is_object_id(id_or_slug):
            query = self.db.query(Post).filter(Post.id == id_or_slug.lower())
        else:
            query = self.db.query(Post).filter(Post.slug == id_or_slug)

        post = query.first()
        if post is None or not is_visible(post.status, include_drafts):
            raise NotFoundError("Post not found")
        return post

    def list_posts(
        self, include_drafts: bool = False, category_id: Optional[str] = None
    ) -> List[Post]:
        """
        Newest first. Public mode (default) returns published posts only;
        administrative mode returns every status.
        """
        query = self.db.query(Post)
        if not include_drafts:
            query = query.filter(Post.status == PostStatus.PUBLISHED.value)
        if category_id:
            query = query.filter(Post.category == category_id)
        return query.order_by(desc(Post.created_at), desc(Post.id)).all()

    # ---- categories ----

    def create_category(
        self, name: str, description: Optional[str] = None, slug: Optional[str] = None
    ) -> Category:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Name is required")

        category_slug = resolve_slug(slug, name)
        self._ensure_category_available(name, category_slug)

        category = Category(name=name, slug=category_slug, description=description or None)
        self.db.add(category)
        self._commit(f"A category named '{name}' or with slug '{category_slug}' already exists")
        self.db.refresh(category)

        logger.info(f"Created category {category.id} ({category.slug})")
        return category

    def get_category(self, category_id: str) -> Optional[Category]:
        if not is_object_id(category_id):
            return None
        return self.db.query(Category).filter(Category.id == category_id.lower()).first()

    def list_categories(self) -> List[Category]:
        return self.db.query(Category).order_by(Category.name.asc()).all()

    def delete_category(self, category_id: str) -> None:
        """Delete a category. Posts keep their (now dangling) reference."""
        category = self.get_category(category_id)
        if category is None:
            raise NotFoundError("Category not found")
        self.db.delete(category)
        self.db.commit()
        logger.info(f"Deleted category {category_id}")

    def category_names(self) -> Dict[str, str]:
        return {category.id: category.name for category in self.list_categories()}

    def category_name_for(self, post: Post) -> str:
        category = self.get_category(post.category) if post.category else None
        names = {category.id: category.name} if category else {}
        return resolve_category_name(post.category, names)

    # ---- dashboard ----

    def stats(self) -> Dict[str, int]:
        counts = dict(
            self.db.query(Post.status, func.count(Post.id)).group_by(Post.status).all()
        )
        published = counts.get(PostStatus.PUBLISHED.value, 0)
        drafts = counts.get(PostStatus.DRAFT.value, 0)
        return {
            "total": published + drafts,
            "published": published,
            "drafts": drafts,
            "categories": self.db.query(func.count(Category.id)).scalar() or 0,
        }

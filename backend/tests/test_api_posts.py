"""Tests for posts API endpoints."""

import pytest
from blogcms.models.post import Post

POSTS = "/api/posts"


@pytest.mark.unit
class TestListPostsAPI:
    def test_public_listing_hides_drafts(self, client, published_post, draft_post):
        response = client.get(POSTS)

        assert response.status_code == 200
        data = response.json()
        assert [p["id"] for p in data] == [published_post.id]

    def test_response_uses_api_field_names(self, client, published_post, test_category, admin_user):
        post = client.get(POSTS).json()[0]

        assert post["featured_image"] == "https://example.com/cover.png"
        assert post["category_id"] == test_category.id
        assert post["category_name"] == "Technology"
        assert post["author_id"] == admin_user.id
        for storage_name in ("image", "category", "author"):
            assert storage_name not in post

    def test_missing_excerpt_is_generated(self, client, published_post):
        post = client.get(POSTS).json()[0]
        assert post["excerpt"] == "Published Story body"

    def test_stored_excerpt_is_kept(self, client, post_factory):
        post_factory("With Excerpt", status="published", excerpt="Hand written")
        assert client.get(POSTS).json()[0]["excerpt"] == "Hand written"

    def test_filter_by_category(self, client, published_post, post_factory, test_category):
        post_factory("Other", status="published")

        response = client.get(POSTS, params={"category": test_category.id})

        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [published_post.id]

    def test_all_requires_token(self, client, published_post):
        response = client.get(POSTS, params={"all": "true"})

        assert response.status_code == 401
        assert response.json()["message"] == "Not authorized, no token"

    def test_all_requires_admin(self, client, published_post, user_headers):
        response = client.get(POSTS, params={"all": "true"}, headers=user_headers)
        assert response.status_code == 403

    def test_all_for_admin_includes_drafts(self, client, published_post, draft_post, admin_headers):
        response = client.get(POSTS, params={"all": "true"}, headers=admin_headers)

        assert response.status_code == 200
        statuses = sorted(p["status"] for p in response.json())
        assert statuses == ["draft", "published"]

    def test_all_false_is_public(self, client, published_post, draft_post):
        response = client.get(POSTS, params={"all": "false"})

        assert response.status_code == 200
        assert len(response.json()) == 1

    def test_dangling_category_reads_uncategorized(
        self, client, db_session, published_post, test_category
    ):
        db_session.delete(test_category)
        db_session.commit()

        post = client.get(POSTS).json()[0]

        assert post["category_id"] == test_category.id
        assert post["category_name"] == "uncategorized"


@pytest.mark.unit
class TestGetPostAPI:
    def test_get_by_slug(self, client, published_post):
        response = client.get(f"{POSTS}/published-story")

        assert response.status_code == 200
        assert response.json()["id"] == published_post.id

    def test_get_by_id(self, client, published_post):
        response = client.get(f"{POSTS}/{published_post.id}")

        assert response.status_code == 200
        assert response.json()["slug"] == "published-story"

    def test_unknown_post(self, client):
        response = client.get(f"{POSTS}/no-such-post")

        assert response.status_code == 404
        assert response.json() == {"message": "Post not found", "error": "not_found"}

    def test_draft_hidden_from_public(self, client, draft_post, user_headers):
        assert client.get(f"{POSTS}/{draft_post.slug}").status_code == 404
        assert client.get(f"{POSTS}/{draft_post.slug}", headers=user_headers).status_code == 404

    def test_draft_visible_to_admin(self, client, draft_post, admin_headers):
        response = client.get(f"{POSTS}/{draft_post.id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["status"] == "draft"

    def test_bad_token_reads_as_public(self, client, published_post, draft_post):
        headers = {"Authorization": "Bearer not-a-jwt"}

        assert client.get(f"{POSTS}/{published_post.slug}", headers=headers).status_code == 200
        assert client.get(f"{POSTS}/{draft_post.slug}", headers=headers).status_code == 404


@pytest.mark.unit
class TestCreatePostAPI:
    def test_create_defaults_to_draft(self, client, admin_headers, admin_user):
        response = client.post(
            POSTS,
            json={"title": "Hello World!", "content": "<p>First post</p>"},
            headers=admin_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["slug"] == "hello-world"
        assert data["status"] == "draft"
        assert data["author_id"] == admin_user.id
        assert data["category_name"] == "uncategorized"
        assert data["excerpt"] == "First post"

    def test_create_accepts_storage_names(self, client, admin_headers, test_category):
        response = client.post(
            POSTS,
            json={
                "title": "Aliased",
                "content": "x",
                "image": "https://example.com/a.png",
                "category": test_category.id,
                "status": "published",
            },
            headers=admin_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["featured_image"] == "https://example.com/a.png"
        assert data["category_id"] == test_category.id
        assert data["category_name"] == "Technology"
        assert data["status"] == "published"

    def test_author_cannot_be_supplied(self, client, admin_headers, admin_user, regular_user):
        response = client.post(
            POSTS,
            json={"title": "Mine", "content": "x", "author_id": regular_user.id},
            headers=admin_headers,
        )

        assert response.status_code == 201
        assert response.json()["author_id"] == admin_user.id

    def test_duplicate_slug(self, client, admin_headers, published_post):
        response = client.post(
            POSTS,
            json={"title": "Published: Story", "content": "x"},
            headers=admin_headers,
        )

        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    def test_invalid_status(self, client, admin_headers):
        response = client.post(
            POSTS,
            json={"title": "T", "content": "x", "status": "archived"},
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_missing_title(self, client, admin_headers):
        response = client.post(POSTS, json={"content": "x"}, headers=admin_headers)

        assert response.status_code == 400
        assert "title" in response.json()["message"]

    def test_requires_admin(self, client, user_headers):
        payload = {"title": "T", "content": "x"}

        assert client.post(POSTS, json=payload).status_code == 401
        assert client.post(POSTS, json=payload, headers=user_headers).status_code == 403


@pytest.mark.unit
class TestUpdatePostAPI:
    def test_publish_a_draft(self, client, draft_post, admin_headers):
        response = client.put(
            f"{POSTS}/{draft_post.id}", json={"status": "published"}, headers=admin_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "published"
        assert data["title"] == "Draft Story"
        assert client.get(f"{POSTS}/{draft_post.slug}").status_code == 200

    def test_empty_fields_are_ignored(self, client, published_post, admin_headers):
        response = client.put(
            f"{POSTS}/{published_post.id}",
            json={"title": "", "featured_image": None, "content": "<p>New</p>"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Published Story"
        assert data["featured_image"] == "https://example.com/cover.png"
        assert data["content"] == "<p>New</p>"

    def test_slug_conflict(self, client, published_post, draft_post, admin_headers):
        response = client.put(
            f"{POSTS}/{draft_post.id}", json={"slug": published_post.slug}, headers=admin_headers
        )
        assert response.status_code == 409

    def test_unknown_post(self, client, admin_headers):
        response = client.put(f"{POSTS}/{'f' * 24}", json={"title": "x"}, headers=admin_headers)
        assert response.status_code == 404

    def test_requires_admin(self, client, published_post, user_headers):
        response = client.put(
            f"{POSTS}/{published_post.id}", json={"title": "x"}, headers=user_headers
        )
        assert response.status_code == 403


@pytest.mark.unit
class TestDeletePostAPI:
    def test_delete(self, client, published_post, admin_headers):
        response = client.delete(f"{POSTS}/{published_post.id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Post removed"}
        assert client.get(f"{POSTS}/{published_post.id}").status_code == 404

    def test_delete_twice(self, client, published_post, admin_headers):
        client.delete(f"{POSTS}/{published_post.id}", headers=admin_headers)
        response = client.delete(f"{POSTS}/{published_post.id}", headers=admin_headers)

        assert response.status_code == 404

    def test_requires_admin(self, client, published_post, user_headers):
        response = client.delete(f"{POSTS}/{published_post.id}", headers=user_headers)

        assert response.status_code == 403
        assert client.get(f"{POSTS}/{published_post.id}").status_code == 200


@pytest.mark.unit
class TestUnauthenticatedPostMutations:
    """Mutations without a token fail with 401 and leave the store untouched."""

    def test_create_without_token(self, client, db_session, published_post):
        response = client.post(POSTS, json={"title": "Sneaky", "content": "x"})

        assert response.status_code == 401
        db_session.expire_all()
        assert db_session.query(Post).count() == 1
        assert db_session.query(Post).filter(Post.slug == "sneaky").first() is None

    def test_update_without_token(self, client, db_session, published_post):
        response = client.put(
            f"{POSTS}/{published_post.id}", json={"title": "Defaced", "status": "draft"}
        )

        assert response.status_code == 401
        db_session.expire_all()
        post = db_session.get(Post, published_post.id)
        assert post.title == "Published Story"
        assert post.status == "published"

    def test_delete_without_token(self, client, db_session, published_post):
        response = client.delete(f"{POSTS}/{published_post.id}")

        assert response.status_code == 401
        db_session.expire_all()
        assert db_session.get(Post, published_post.id) is not None

    def test_bad_token_behaves_like_no_token(self, client, db_session, published_post):
        headers = {"Authorization": "Bearer not-a-jwt"}

        assert client.put(
            f"{POSTS}/{published_post.id}", json={"title": "Defaced"}, headers=headers
        ).status_code == 401
        assert client.delete(f"{POSTS}/{published_post.id}", headers=headers).status_code == 401

        db_session.expire_all()
        assert db_session.get(Post, published_post.id).title == "Published Story"


@pytest.mark.unit
class TestIdentifierShapedSlugs:
    def test_rejected_on_create(self, client, db_session, admin_headers):
        response = client.post(
            POSTS,
            json={"title": "deadbeefdeadbeefdeadbeef", "content": "x"},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert db_session.query(Post).count() == 0

    def test_rejected_on_update(self, client, published_post, admin_headers):
        response = client.put(
            f"{POSTS}/{published_post.id}",
            json={"slug": "507f1f77bcf86cd799439011"},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert client.get(f"{POSTS}/published-story").status_code == 200

"""
Storage <-> API field names for posts.

Posts are stored under their document-style names
(``image``, ``category``, ``author``); the API speaks the names the UIs use
(``featured_image``, ``category_id``, ``author_id``). This table is the only
place the renaming happens. Request schemas accept the storage spellings as
aliases, so payloads reach ``to_storage`` already in API names.
"""

from typing import Any, Dict, Mapping

# storage name -> API name; every stored post field appears exactly once
POST_FIELDS: Dict[str, str] = {
    "id": "id",
    "title": "title",
    "slug": "slug",
    "content": "content",
    "excerpt": "excerpt",
    "image": "featured_image",
    "category": "category_id",
    "status": "status",
    "author": "author_id",
    "created_at": "created_at",
    "updated_at": "updated_at",
}

API_TO_STORAGE: Dict[str, str] = {api: storage for storage, api in POST_FIELDS.items()}

if len(API_TO_STORAGE) != len(POST_FIELDS):
    raise RuntimeError("POST_FIELDS must map storage names to distinct API names")


def to_api(document: Mapping[str, Any]) -> Dict[str, Any]:
    """Rename storage keys to API keys. Unknown keys raise ``KeyError``."""
    return {POST_FIELDS[key]: value for key, value in document.items()}


def to_storage(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Rename API keys to storage keys. Inverse of ``to_api``."""
    return {API_TO_STORAGE[key]: value for key, value in payload.items()}


def post_document(post) -> Dict[str, Any]:
    """Storage-named snapshot of a ``Post`` row."""
    return {field: getattr(post, field) for field in POST_FIELDS}

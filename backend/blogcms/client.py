"""
HTTP client for the BlogCMS API with a pluggable session cache.

The cache holds the token and public identity between runs, the way the
admin UI keeps them in browser local storage. It is passed in rather than
being global, so tests and tools can choose where a session lives:

    client = BlogClient("http://localhost:8000", cache=FileSessionCache(path))
    client.start()            # restore a saved session, if any
    client.login(email, password)
    client.create_post({"title": "Hello", "content": "<p>Hi</p>"})
    client.logout()           # forget it again
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


class BlogAPIError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class SessionCache(ABC):
    """Where a client keeps ``{"token", "email", "isAdmin"}`` between runs."""

    @abstractmethod
    def load(self) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    def save(self, session: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...


class MemorySessionCache(SessionCache):
    def __init__(self, session: Optional[Dict[str, Any]] = None):
        self._session = dict(session) if session else None

    def load(self) -> Optional[Dict[str, Any]]:
        return dict(self._session) if self._session else None

    def save(self, session: Dict[str, Any]) -> None:
        self._session = dict(session)

    def clear(self) -> None:
        self._session = None


class FileSessionCache(SessionCache):
    """JSON file cache. Unreadable content counts as no session and is removed."""

    def __init__(self, path):
        self.path = Path(path)

    def load(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None
        try:
            session = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Discarding unreadable session cache {self.path}: {e}")
            self.clear()
            return None
        if not isinstance(session, dict) or not session.get("token"):
            self.clear()
            return None
        return session

    def save(self, session: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(session), encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class BlogClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        cache: Optional[SessionCache] = None,
        api_prefix: str = "/api",
        http: Optional[httpx.Client] = None,
    ):
        self.cache = cache or MemorySessionCache()
        self.api_prefix = api_prefix.rstrip("/")
        self.http = http or httpx.Client(base_url=base_url, timeout=10.0)
        self.session: Optional[Dict[str, Any]] = None

    # ---- session lifecycle ----

    def start(self) -> Optional[Dict[str, Any]]:
        """Restore the cached session. Returns it, or None when logged out."""
        self.session = self.cache.load()
        return self.session

    @property
    def is_authenticated(self) -> bool:
        return bool(self.session and self.session.get("token"))

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        if not self.is_authenticated:
            return None
        return {
            "email": self.session.get("email"),
            "isAdmin": bool(self.session.get("isAdmin")),
        }

    def _remember(self, data: Dict[str, Any]) -> Dict[str, Any]:
        self.session = {
            "token": data["token"],
            "email": data["email"],
            "isAdmin": data["isAdmin"],
        }
        self.cache.save(self.session)
        return self.user

    def logout(self) -> None:
        self.session = None
        self.cache.clear()

    # ---- transport ----

    def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if self.is_authenticated:
            headers["Authorization"] = f"Bearer {self.session['token']}"

        response = self.http.request(
            method, f"{self.api_prefix}{path}", headers=headers, **kwargs
        )

        if response.status_code == 401:
            # Token missing, expired or revoked: drop the session
            self.logout()

        if response.is_error:
            try:
                message = response.json().get("message") or response.text
            except ValueError:
                message = response.text
            raise BlogAPIError(response.status_code, message)

        return response.json()

    # ---- auth ----

    def register(self, email: str, password: str) -> Dict[str, Any]:
        data = self._request("POST", "/auth/register", json={"email": email, "password": password})
        return self._remember(data)

    def login(self, email: str, password: str) -> Dict[str, Any]:
        data = self._request("POST", "/auth/login", json={"email": email, "password": password})
        return self._remember(data)

    def me(self) -> Dict[str, Any]:
        return self._request("GET", "/auth/me")

    # ---- posts ----

    def list_posts(self, include_drafts: bool = False, category_id: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {}
        if include_drafts:
            params["all"] = "true"
        if category_id:
            params["category"] = category_id
        return self._request("GET", "/posts", params=params)

    def get_post(self, id_or_slug: str) -> Dict[str, Any]:
        return self._request("GET", f"/posts/{id_or_slug}")

    def create_post(self, form: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/posts", json=form)

    def update_post(self, post_id: str, form: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/posts/{post_id}", json=form)

    def delete_post(self, post_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/posts/{post_id}")

    # ---- categories ----

    def list_categories(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/categories")

    def create_category(self, name: str, description: Optional[str] = None) -> Dict[str, Any]:
        return self._request("POST", "/categories", json={"name": name, "description": description})

    def delete_category(self, category_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/categories/{category_id}")

    def stats(self) -> Dict[str, Any]:
        return self._request("GET", "/stats")

    def close(self) -> None:
        self.http.close()

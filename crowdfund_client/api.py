import json
import os
from typing import Any, BinaryIO, Dict, List, Optional, Tuple

import requests

DEFAULT_API_URL = "http://localhost:8000"


class ApiError(Exception):
    """Non-2xx response; `message` is the server's ``error`` text when it sent one."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


def safe_json(resp) -> Any:
    try:
        return resp.json()
    except ValueError:
        return None


class CrowdfundClient:
    """
    HTTP client for the crowdfund API.

    The session's cookie jar carries the ``token`` cookie set by login, so every
    later call on the same client is authenticated. Any object with the
    ``requests.Session`` call signatures can be passed as `session`.
    """

    def __init__(self, base_url: Optional[str] = None, session=None, timeout: float = 10):
        self.base_url = (base_url or os.getenv("CROWDFUND_API_URL", DEFAULT_API_URL)).rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def url(self, path: str) -> str:
        if path.startswith("/uploads") or path.startswith("uploads"):
            return f"{self.base_url}/{path.lstrip('/')}"
        return f"{self.base_url}/api/{path.lstrip('/')}"

    def _request(self, method: str, path: str, **kwargs) -> Any:
        resp = self.session.request(method, self.url(path), timeout=self.timeout, **kwargs)
        data = safe_json(resp)
        if resp.status_code >= 400:
            message = None
            if isinstance(data, dict):
                message = data.get("error")
            raise ApiError(resp.status_code, message or f"Request failed with status {resp.status_code}")
        return data

    # ---------------- Auth ----------------
    def register(self, first_name: str, last_name: str, email: str, password: str,
                 avatar: Optional[str] = None) -> Dict[str, Any]:
        payload = {"firstName": first_name, "lastName": last_name, "email": email, "password": password}
        if avatar:
            payload["avatar"] = avatar
        return self._request("POST", "register", json=payload)

    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self._request("POST", "login", json={"email": email, "password": password})

    def logout(self) -> bool:
        result = self._request("POST", "logout")
        self.session.cookies.clear()
        return result

    def profile(self) -> Dict[str, Any]:
        return self._request("GET", "profile")

    # ---------------- Events ----------------
    def list_events(self, page: int = 1, limit: int = 9, tags: Optional[str] = None,
                    is_active: bool = True) -> Dict[str, Any]:
        params = {"page": page, "limit": limit, "isActive": "true" if is_active else "false"}
        if tags:
            params["tags"] = tags
        return self._request("GET", "events", params=params)

    def get_event(self, event_id: int) -> Dict[str, Any]:
        return self._request("GET", f"events/{event_id}")

    def my_events(self) -> List[Dict[str, Any]]:
        return self._request("GET", "my-events")

    def create_event(self, title: str, description: str, amount_to_raise: float,
                     tags: Optional[List[str]] = None, image_url: Optional[str] = None,
                     image: Optional[Tuple[str, BinaryIO, str]] = None) -> Dict[str, Any]:
        """
        Submit the campaign form as multipart data.

        `image` is a ``(filename, fileobj, content_type)`` tuple for an uploaded file;
        the form carries either a file or an external URL.
        """
        data = {
            "title": title,
            "description": description,
            "amountToRaise": str(amount_to_raise),
            "tags": json.dumps(tags or []),
        }
        if image_url:
            data["imageUrl"] = image_url
        files = {"uploadedImage": image} if image else None
        return self._request("POST", "events", data=data, files=files)

    def update_event(self, event_id: int, **fields) -> Dict[str, Any]:
        """Send only the given fields, using the API's camelCase names."""
        return self._request("PUT", f"events/{event_id}", json=fields)

    def delete_event(self, event_id: int) -> Dict[str, Any]:
        return self._request("DELETE", f"events/{event_id}")

    def contribute(self, event_id: int, amount: float) -> Dict[str, Any]:
        # Contributions are accepted without a session
        return self._request("PATCH", f"events/{event_id}/contribute", json={"amount": amount})

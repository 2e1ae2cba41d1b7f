"""
HTTP client for the Store Ratings API.

Every call goes through ``StoreRatingClient._request``, which attaches the
session's bearer token and turns error responses into exceptions.
"""
import logging
from typing import Any, Dict, List, Optional

import requests

from client.session import AuthSession

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """An error response from the API."""

    def __init__(self, status_code: int, message: str, details: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        self.message = message
        self.details = details or {}
        super().__init__(f"{status_code}: {message}")

    @property
    def field_errors(self) -> Dict[str, str]:
        """Validation failures keyed by field name."""
        return {
            error["field"]: error["message"]
            for error in self.details.get("errors", [])
            if "field" in error
        }


class SessionExpiredError(ApiError):
    """The token was missing, invalid or expired; the session has been cleared."""


class StoreRatingClient:

    def __init__(self, base_url: str, session: Optional[AuthSession] = None,
                 http: Any = None, timeout: Optional[float] = 10.0):
        self.base_url = base_url.rstrip("/")
        self.session = session or AuthSession()
        # Anything with a requests-compatible request() method
        self.http = http or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, json: Any = None,
                 params: Optional[Dict[str, Any]] = None, authenticated: bool = True) -> Any:
        kwargs: Dict[str, Any] = {"headers": {}}
        if authenticated:
            kwargs["headers"].update(self.session.authorization_header())
        if json is not None:
            kwargs["json"] = json
        if params:
            kwargs["params"] = {k: v for k, v in params.items() if v not in (None, "")}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout

        response = self.http.request(method, f"{self.base_url}{path}", **kwargs)

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code >= 400:
            message = body.get("message") if isinstance(body, dict) else None
            details = body.get("details") if isinstance(body, dict) else None
            message = message or f"Request failed with status: {response.status_code}"

            if response.status_code == 401 and authenticated:
                logger.warning("Unauthorized response, clearing session")
                self.session.clear()
                raise SessionExpiredError(response.status_code, message, details)

            raise ApiError(response.status_code, message, details)

        return body

    # Auth

    def signup(self, name: str, email: str, password: str, address: str,
               role: str = "user", store_name: Optional[str] = None) -> Dict[str, Any]:
        payload = {"name": name, "email": email, "password": password, "address": address, "role": role}
        if store_name:
            payload["store_name"] = store_name
        data = self._request("POST", "/api/auth/signup", json=payload, authenticated=False)
        self.session.set(data["access_token"], data["user"])
        return data

    def login(self, email: str, password: str) -> Dict[str, Any]:
        try:
            data = self._request(
                "POST", "/api/auth/login",
                json={"email": email, "password": password},
                authenticated=False
            )
        except ApiError:
            self.session.clear()
            raise
        self.session.set(data["access_token"], data["user"])
        return data

    def logout(self) -> None:
        try:
            if self.session.is_authenticated:
                self._request("POST", "/api/auth/logout")
        finally:
            self.session.clear()

    def update_password(self, current_password: str, new_password: str) -> Dict[str, Any]:
        return self._request("PUT", "/api/auth/update-password", json={
            "current_password": current_password,
            "new_password": new_password,
        })

    # Profile

    def get_profile(self) -> Dict[str, Any]:
        return self._request("GET", "/api/user/profile")

    def update_profile(self, name: Optional[str] = None, address: Optional[str] = None) -> Dict[str, Any]:
        payload = {k: v for k, v in {"name": name, "address": address}.items() if v is not None}
        profile = self._request("PUT", "/api/user/profile", json=payload)
        self.session.update_user(profile)
        return profile

    # Admin

    def admin_stats(self) -> Dict[str, int]:
        return self._request("GET", "/api/admin/stats")

    def admin_list_users(self, search: Optional[str] = None, role: Optional[str] = None) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/admin/users", params={"search": search, "role": role})

    def admin_get_user(self, user_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/admin/users/{user_id}")

    def admin_create_user(self, name: str, email: str, password: str, address: str,
                          role: str = "user") -> Dict[str, Any]:
        return self._request("POST", "/api/admin/users", json={
            "name": name, "email": email, "password": password, "address": address, "role": role,
        })

    def admin_delete_user(self, user_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/api/admin/users/{user_id}")

    def admin_list_stores(self, search: Optional[str] = None) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/admin/stores", params={"search": search})

    def admin_get_store(self, store_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/admin/stores/{store_id}")

    def admin_create_store(self, name: str, address: str, owner_id: str) -> Dict[str, Any]:
        return self._request("POST", "/api/admin/stores", json={
            "name": name, "address": address, "owner_id": owner_id,
        })

    def admin_delete_store(self, store_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/api/admin/stores/{store_id}")

    # Stores and ratings

    def list_stores(self, search: Optional[str] = None, address: Optional[str] = None) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/stores", params={"search": search, "address": address})

    def my_store(self) -> Dict[str, Any]:
        return self._request("GET", "/api/stores/my-store")

    def my_ratings(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/ratings/mine")

    def rate_store(self, store_id: str, rating_value: int) -> Dict[str, Any]:
        return self._request("POST", "/api/ratings", json={"store_id": store_id, "rating_value": rating_value})

    def update_rating(self, store_id: str, rating_value: int) -> Dict[str, Any]:
        return self._request("PUT", f"/api/ratings/{store_id}", json={"rating_value": rating_value})

    def delete_rating(self, store_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/api/ratings/{store_id}")

"""
Client-side auth state: the bearer token and user record of whoever is logged in.

The session is an explicit object handed to the API client instead of
module-level globals. It can be backed by a JSON file so that several
processes (or a restarted one) see the same login, the way a browser shares
local storage between tabs.
"""
import json
import logging
import os
from typing import Any, Dict, Iterable, Optional

logger = logging.getLogger(__name__)

TOKEN_KEY = "auth_token"
USER_KEY = "current_user"


class AuthSession:
    """Holds a token and user, and optionally persists them to ``storage_path``."""

    def __init__(self, token: Optional[str] = None, user: Optional[Dict[str, Any]] = None,
                 storage_path: Optional[str] = None):
        self.token = token
        self.user = user
        self.storage_path = storage_path

    @classmethod
    def load(cls, storage_path: str) -> "AuthSession":
        session = cls(storage_path=storage_path)
        session.reload()
        return session

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and self.user is not None

    @property
    def role(self) -> Optional[str]:
        return self.user.get("role") if self.user else None

    def has_role(self, role: str) -> bool:
        return self.role == role

    def has_any_role(self, roles: Iterable[str]) -> bool:
        return self.role is not None and self.role in set(roles)

    def authorization_header(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def set(self, token: str, user: Dict[str, Any]) -> None:
        self.token = token
        self.user = user
        logger.info(f"Session set for user: {user.get('email')}")
        self._save()

    def update_user(self, user: Dict[str, Any]) -> None:
        """Replace the cached user record (e.g. after a profile edit), keeping the token."""
        self.user = user
        self._save()

    def clear(self) -> None:
        self.token = None
        self.user = None
        if self.storage_path and os.path.exists(self.storage_path):
            os.remove(self.storage_path)
        logger.info("Session cleared")

    def reload(self) -> None:
        """Re-read the persisted state, picking up logins or logouts made elsewhere."""
        if not self.storage_path or not os.path.exists(self.storage_path):
            self.token = None
            self.user = None
            return

        try:
            with open(self.storage_path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read stored session from {self.storage_path}: {str(e)}")
            self.clear()
            return

        self.token = data.get(TOKEN_KEY)
        self.user = data.get(USER_KEY)

    def _save(self) -> None:
        if not self.storage_path:
            return
        with open(self.storage_path, "w", encoding="utf-8") as fh:
            json.dump({TOKEN_KEY: self.token, USER_KEY: self.user}, fh)

"""
Session utilisateur côté client.
- login/register/refresh retournent une enveloppe {success, user} ou {success: False, message} (jamais d'exception)
- le jeton est transmis au client API (en-tête Bearer) et, si un stockage est fourni, persisté
"""
import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from .api import ApiClientError, StorefrontApi
from .config import TOKEN_STORAGE_KEY
from .models import LoginForm, RegisterForm
from .storage import JsonStateStorage

logger = logging.getLogger(__name__)


def _form_error(e: PydanticValidationError) -> str:
    first = (e.errors() or [{}])[0]
    field = ".".join(str(p) for p in first.get("loc", ()))
    return f"{field}: {first.get('msg', 'invalid value')}" if field else "Invalid form"


class AuthStore:
    def __init__(self, api: StorefrontApi, storage: Optional[JsonStateStorage] = None):
        self.api = api
        self._storage = storage
        self.user: Optional[Dict[str, Any]] = None
        self.token: Optional[str] = None
        if storage is not None:
            self._set_token(storage.load(TOKEN_STORAGE_KEY))

    def _set_token(self, token: Optional[str]) -> None:
        self.token = token or None
        self.api.token = self.token
        if self._storage is not None:
            if self.token:
                self._storage.save(TOKEN_STORAGE_KEY, self.token)
            else:
                self._storage.delete(TOKEN_STORAGE_KEY)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token and self.user)

    @property
    def is_admin(self) -> bool:
        return self.is_authenticated and (self.user or {}).get("role") == "admin"

    def _open_session(self, data: Dict[str, Any]) -> Dict[str, Any]:
        self._set_token(data.get("token"))
        self.user = data.get("user")
        return {"success": True, "user": self.user}

    def login(self, email: str, password: str) -> Dict[str, Any]:
        try:
            form = LoginForm(email=email, password=password)
        except PydanticValidationError as e:
            return {"success": False, "message": _form_error(e)}
        try:
            return self._open_session(self.api.login(form.email, form.password))
        except ApiClientError as e:
            logger.info("auth.login refused status=%s", e.status_code)
            return {"success": False, "message": e.message or "Login failed. Please try again."}

    def register(self, first_name: str, last_name: str, email: str, password: str) -> Dict[str, Any]:
        try:
            form = RegisterForm(first_name=first_name, last_name=last_name, email=email, password=password)
        except PydanticValidationError as e:
            return {"success": False, "message": _form_error(e)}
        try:
            data = self.api.register(form.first_name, form.last_name, form.email, form.password)
            return self._open_session(data)
        except ApiClientError as e:
            return {"success": False, "message": e.message or "Registration failed. Please try again."}

    def refresh(self) -> Dict[str, Any]:
        """Revalide le jeton via /me; un jeton refusé ferme la session."""
        if not self.token:
            return {"success": False, "message": "No token found"}
        try:
            self.user = self.api.me()
            return {"success": True, "user": self.user}
        except ApiClientError as e:
            logger.info("auth.refresh token rejected status=%s", e.status_code)
            self.logout()
            return {"success": False, "message": e.message or "Failed to refresh user data"}

    def logout(self) -> None:
        self._set_token(None)
        self.user = None

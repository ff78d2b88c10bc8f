"""
Client HTTP générique du backend (httpx).
- Requêtes JSON, en-tête Authorization: Bearer <token> si authentifié
- Réponse non 2xx ou {"success": false} => ApiClientError(message, status_code)
- Erreur réseau => ApiClientError(status_code=None)
Un client httpx existant peut être injecté (ex: TestClient de FastAPI).
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple
from urllib.parse import quote

import httpx

from .config import STOREFRONT_API_URL, STOREFRONT_TIMEOUT

logger = logging.getLogger(__name__)

# (nom de fichier, contenu, type MIME)
FilePart = Tuple[str, bytes, str]


def _path_id(value: str) -> str:
    # "/" conservé pour les public_id à dossier
    return quote(str(value), safe="/")


class ApiClientError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class StorefrontApi:
    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = (base_url or STOREFRONT_API_URL).rstrip("/")
        self.token = token
        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else STOREFRONT_TIMEOUT,
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "StorefrontApi":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            resp = self._client.request(method, path, headers=self._headers(), **kwargs)
        except httpx.HTTPError as e:
            logger.warning("storefront.api %s %s network error: %s", method, path, e)
            raise ApiClientError(f"Network error: {e}") from e

        try:
            body = resp.json()
        except ValueError:
            body = {"message": resp.text}
        if not isinstance(body, dict):
            body = {"data": body}

        if resp.status_code >= 400 or body.get("success") is False:
            message = body.get("message") or body.get("error") or f"Request failed ({resp.status_code})"
            raise ApiClientError(message, resp.status_code)
        return body

    # --- Paiements ---

    def create_payment_intent(
        self, amount: int, currency: str = "usd", metadata: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        payload = {"amount": amount, "currency": currency, "metadata": metadata or {}}
        return self._request("POST", "/api/payments/create-intent", json=payload)

    def get_payment(self, payment_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/payments/payment/{_path_id(payment_id)}")["payment"]

    def get_payment_config(self) -> Dict[str, Any]:
        return self._request("GET", "/api/payments/config")

    # --- Images ---

    def upload_image(self, filename: str, content: bytes, content_type: str = "image/jpeg") -> Dict[str, Any]:
        return self._request("POST", "/api/uploads/image", files={"image": (filename, content, content_type)})

    def upload_images(self, files: Iterable[FilePart]) -> List[Dict[str, Any]]:
        parts = [("images", part) for part in files]
        return self._request("POST", "/api/uploads/images", files=parts)["images"]

    def delete_image(self, public_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/api/uploads/image/{_path_id(public_id)}")

    def get_image(self, public_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/uploads/image/{_path_id(public_id)}")["image"]

    def uploads_health(self) -> Dict[str, Any]:
        return self._request("GET", "/api/uploads/health")

    # --- Comptes et commandes (service externe) ---

    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self._request("POST", "/api/auth/login", json={"email": email, "password": password})

    def register(self, first_name: str, last_name: str, email: str, password: str) -> Dict[str, Any]:
        payload = {"firstName": first_name, "lastName": last_name, "email": email, "password": password}
        return self._request("POST", "/api/auth/register", json=payload)

    def me(self) -> Dict[str, Any]:
        return self._request("GET", "/api/auth/me")["user"]

    def list_orders(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/orders").get("orders", [])

    def create_order(self, order_data: Dict[str, Any]) -> Dict[str, Any]:
        """Enregistre une commande; retourne la commande créée (champ "order" de la réponse)."""
        return self._request("POST", "/api/orders", json=order_data).get("order") or {}

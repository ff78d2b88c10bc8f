"""
Session de paiement: crée le PaymentIntent côté backend et conserve {clientSecret, paymentIntentId}
pour le widget de paiement. Les erreurs serveur sont affichées en toast puis relancées.
"""
import logging
from typing import Any, Dict, Optional

from .api import ApiClientError, StorefrontApi
from .toasts import ToastQueue

logger = logging.getLogger(__name__)


class PaymentSession:
    def __init__(self, api: StorefrontApi, toasts: ToastQueue):
        self.api = api
        self.toasts = toasts
        self.loading = False
        self.payment_intent: Optional[Dict[str, str]] = None
        self.publishable_key: Optional[str] = None

    def create_intent(
        self, amount: int, currency: str = "usd", metadata: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        self.loading = True
        try:
            data = self.api.create_payment_intent(amount, currency, metadata)
            self.payment_intent = {
                "clientSecret": data["clientSecret"],
                "paymentIntentId": data["paymentIntentId"],
            }
            return data
        except ApiClientError as e:
            logger.warning("payment.create_intent failed status=%s: %s", e.status_code, e.message)
            self.toasts.error(e.message or "Failed to create payment intent")
            raise
        finally:
            self.loading = False

    def load_publishable_key(self) -> Optional[str]:
        """Clé publique du widget; None (et toast) si le backend ne l'expose pas."""
        try:
            self.publishable_key = self.api.get_payment_config().get("publishableKey")
        except ApiClientError as e:
            self.toasts.error(e.message)
            self.publishable_key = None
        return self.publishable_key

    def status(self) -> Optional[str]:
        if not self.payment_intent:
            return None
        return self.api.get_payment(self.payment_intent["paymentIntentId"]).get("status")

    def reset(self) -> None:
        self.payment_intent = None

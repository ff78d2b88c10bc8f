"""
Cas d'usage 'payments': validation métier puis délégation à l'adaptateur Stripe.
- create_intent: refuse tout montant absent ou < PAYMENT_MIN_AMOUNT sans appeler Stripe.
- handle_webhook_event: dispatch d'un événement déjà vérifié selon son type.
"""
import logging
from typing import Any, Callable, Dict, Optional

from backend.config import PAYMENT_MIN_AMOUNT, PAYMENT_DEFAULT_CURRENCY
from backend.utils.errors import ValidationError
from backend.utils.result import ServiceResult
from . import stripe_client

logger = logging.getLogger(__name__)

UNHANDLED = "unhandled"

def validate_amount(amount: Optional[int]) -> int:
    """
    Montant en plus petite unité monétaire (centimes).
    - Soulève ValidationError si absent ou inférieur au minimum facturable Stripe.
    """
    if amount is None or isinstance(amount, bool) or amount < PAYMENT_MIN_AMOUNT:
        raise ValidationError(f"Amount must be at least {PAYMENT_MIN_AMOUNT} cents")
    return int(amount)

def _stringify_metadata(metadata: Optional[Dict[str, Any]]) -> Dict[str, str]:
    # Stripe n'accepte que des valeurs texte dans metadata
    return {str(k): str(v) for k, v in (metadata or {}).items() if v is not None}

async def create_intent(
    amount: Optional[int],
    currency: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> ServiceResult:
    amount = validate_amount(amount)
    currency = (currency or PAYMENT_DEFAULT_CURRENCY).strip().lower()
    return await stripe_client.create_payment_intent(amount, currency, _stringify_metadata(metadata))

async def get_payment(payment_intent_id: str) -> ServiceResult:
    if not (payment_intent_id or "").strip():
        raise ValidationError("Payment id is required")
    return await stripe_client.get_payment_intent(payment_intent_id.strip())

# --- Webhook ---

def _on_payment_succeeded(intent: Dict[str, Any]) -> None:
    # Point d'extension: marquer la commande correspondante comme payée
    logger.info("payments.webhook payment succeeded id=%s amount=%s", intent.get("id"), intent.get("amount"))

def _on_payment_failed(intent: Dict[str, Any]) -> None:
    error = (intent.get("last_payment_error") or {}).get("message")
    logger.warning("payments.webhook payment failed id=%s error=%s", intent.get("id"), error)

WEBHOOK_HANDLERS: Dict[str, Callable[[Dict[str, Any]], None]] = {
    "payment_intent.succeeded": _on_payment_succeeded,
    "payment_intent.payment_failed": _on_payment_failed,
}

def handle_webhook_event(event: Dict[str, Any]) -> str:
    """
    Dispatch d'un événement Stripe vérifié.
    Retour: le type traité, ou UNHANDLED pour les types sans handler (toujours acquittés).
    """
    event_type = (event or {}).get("type") or ""
    handler = WEBHOOK_HANDLERS.get(event_type)
    if handler is None:
        logger.info("payments.webhook unhandled event type=%s", event_type)
        return UNHANDLED
    data_obj = ((event.get("data") or {}).get("object")) or {}
    handler(data_obj)
    return event_type

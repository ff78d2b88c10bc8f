"""
Module 'payments' (feature-first): point d'entrée public.
Réunit l'adaptateur Stripe, les cas d'usage (PaymentIntent, webhook) et les modèles de requête.
"""

from .stripe_client import (
    require_stripe,
    create_payment_intent,
    get_payment_intent,
    create_customer,
    create_product,
    create_price,
    refund_payment,
    verify_webhook_signature,
)
from .service import validate_amount, create_intent, get_payment, handle_webhook_event

__all__ = [
    # stripe
    "require_stripe",
    "create_payment_intent",
    "get_payment_intent",
    "create_customer",
    "create_product",
    "create_price",
    "refund_payment",
    "verify_webhook_signature",
    # services
    "validate_amount",
    "create_intent",
    "get_payment",
    "handle_webhook_event",
]

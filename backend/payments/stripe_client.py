"""
Adaptateur Stripe: centralise la configuration et les appels au SDK.
- Les appels SDK (bloquants) sont exécutés dans le threadpool via run_in_threadpool.
- Aucune exception ne traverse cette frontière: tout est normalisé en ServiceResult.
"""
import json
import logging
from typing import Any, Dict, Iterable, Optional

import stripe
from fastapi.concurrency import run_in_threadpool

from backend.config import STRIPE_SECRET_KEY, PAYMENT_DEFAULT_CURRENCY
from backend.utils.result import ServiceResult

logger = logging.getLogger(__name__)

# module backend.payments.stripe_client
def require_stripe():
    """
    Prépare et retourne le module stripe prêt à l'emploi.
    - Configure stripe.api_key via STRIPE_SECRET_KEY si disponible.
    - En absence de clé, les appels échouent côté SDK (AuthenticationError) et sont normalisés.
    """
    if STRIPE_SECRET_KEY:
        stripe.api_key = STRIPE_SECRET_KEY
    return stripe

def _error_message(e: Exception) -> str:
    # user_message est le message lisible fourni par Stripe (absent sur les erreurs réseau)
    return getattr(e, "user_message", None) or str(e) or e.__class__.__name__

def summarize_payment_intent(intent: Any) -> Dict[str, Any]:
    """Vue réduite d'un PaymentIntent exposée aux clients: {id, amount, currency, status, created}."""
    return {
        "id": intent["id"],
        "amount": intent["amount"],
        "currency": intent["currency"],
        "status": intent["status"],
        "created": intent["created"],
    }

async def create_payment_intent(
    amount: int,
    currency: str = PAYMENT_DEFAULT_CURRENCY,
    metadata: Optional[Dict[str, str]] = None,
) -> ServiceResult:
    """
    Crée un PaymentIntent avec sélection automatique du moyen de paiement.
    Retour: ServiceResult(clientSecret, paymentIntentId) ou l'erreur Stripe.
    """
    require_stripe()
    try:
        intent = await run_in_threadpool(
            stripe.PaymentIntent.create,
            amount=amount,
            currency=currency,
            automatic_payment_methods={"enabled": True},
            metadata=metadata or {},
        )
        return ServiceResult.ok(clientSecret=intent["client_secret"], paymentIntentId=intent["id"])
    except Exception as e:
        logger.exception("stripe_client.create_payment_intent failed amount=%s currency=%s", amount, currency)
        return ServiceResult.fail(_error_message(e))

async def get_payment_intent(payment_intent_id: str) -> ServiceResult:
    require_stripe()
    try:
        intent = await run_in_threadpool(stripe.PaymentIntent.retrieve, payment_intent_id)
        return ServiceResult.ok(paymentIntent=summarize_payment_intent(intent))
    except Exception as e:
        logger.exception("stripe_client.get_payment_intent failed id=%s", payment_intent_id)
        return ServiceResult.fail(_error_message(e))

async def create_customer(email: str, name: str, metadata: Optional[Dict[str, str]] = None) -> ServiceResult:
    require_stripe()
    try:
        customer = await run_in_threadpool(stripe.Customer.create, email=email, name=name, metadata=metadata or {})
        return ServiceResult.ok(customer=dict(customer))
    except Exception as e:
        logger.exception("stripe_client.create_customer failed email=%s", email)
        return ServiceResult.fail(_error_message(e))

async def create_product(name: str, description: str, images: Iterable[str] = ()) -> ServiceResult:
    require_stripe()
    try:
        product = await run_in_threadpool(
            stripe.Product.create, name=name, description=description, images=list(images)
        )
        return ServiceResult.ok(product=dict(product))
    except Exception as e:
        logger.exception("stripe_client.create_product failed name=%s", name)
        return ServiceResult.fail(_error_message(e))

async def create_price(product_id: str, unit_amount: int, currency: str = PAYMENT_DEFAULT_CURRENCY) -> ServiceResult:
    require_stripe()
    try:
        price = await run_in_threadpool(
            stripe.Price.create, product=product_id, unit_amount=unit_amount, currency=currency
        )
        return ServiceResult.ok(price=dict(price))
    except Exception as e:
        logger.exception("stripe_client.create_price failed product=%s", product_id)
        return ServiceResult.fail(_error_message(e))

async def refund_payment(payment_intent_id: str, amount: Optional[int] = None) -> ServiceResult:
    """Rembourse un PaymentIntent; amount=None rembourse la totalité."""
    require_stripe()
    params: Dict[str, Any] = {"payment_intent": payment_intent_id}
    if amount is not None:
        params["amount"] = amount
    try:
        refund = await run_in_threadpool(stripe.Refund.create, **params)
        return ServiceResult.ok(refund=dict(refund))
    except Exception as e:
        logger.exception("stripe_client.refund_payment failed id=%s", payment_intent_id)
        return ServiceResult.fail(_error_message(e))

def verify_webhook_signature(payload: bytes, signature: Optional[str], secret: str) -> ServiceResult:
    """
    Valide un événement Stripe signé (webhook).
    - payload: body brut, octet pour octet (la signature couvre ces octets exacts)
    - signature: en-tête Stripe-Signature
    - secret: STRIPE_WEBHOOK_SECRET; absent => refus (jamais de mode non vérifié)
    Retour: ServiceResult(event) si la signature est valide, sinon l'erreur de vérification.
    """
    if not secret:
        return ServiceResult.fail("Webhook signing secret is not configured")
    if not signature:
        return ServiceResult.fail("Missing stripe-signature header")
    try:
        stripe.Webhook.construct_event(payload, signature, secret)
        # vue dict simple de l'événement vérifié (indépendante de la version du SDK)
        event = json.loads(payload)
    except Exception as e:
        logger.warning("stripe_client.verify_webhook_signature rejected: %s", e)
        return ServiceResult.fail(_error_message(e))
    return ServiceResult.ok(event=event)

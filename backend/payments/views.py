import logging

from fastapi import APIRouter, Request, Depends
from fastapi.responses import PlainTextResponse

from backend.config import STRIPE_WEBHOOK_SECRET, STRIPE_PUBLISHABLE_KEY
from backend.utils.errors import VendorError
from backend.utils.rate_limit import optional_rate_limit
from backend.payments import stripe_client
from backend.payments import service as payments_service
from backend.payments.models import CreateIntentRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/payments", tags=["Payments API"])

# module backend.payments.views
@router.post("/create-intent", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def create_payment_intent(body: CreateIntentRequest):
    """
    Crée un PaymentIntent Stripe pour le widget de paiement.
    - Entrée JSON: {"amount": <int, centimes>, "currency"?: "usd", "metadata"?: {...}}
    - 400 si amount absent ou < 50 (aucun appel Stripe)
    - 500 si Stripe refuse l'appel (message Stripe relayé)
    """
    result = await payments_service.create_intent(body.amount, body.currency, body.metadata)
    if not result.success:
        raise VendorError(result.error or "Failed to create payment intent")
    return {
        "success": True,
        "clientSecret": result.get("clientSecret"),
        "paymentIntentId": result.get("paymentIntentId"),
    }

@router.post("/webhook", include_in_schema=False)
async def stripe_webhook(request: Request):
    """
    Webhook Stripe (PaymentIntent).
    - Signature: body brut + en-tête stripe-signature vérifiés contre STRIPE_WEBHOOK_SECRET
    - Échec de vérification: 400 texte, aucun dispatch
    - Après vérification: dispatch selon event.type puis toujours 200 {"received": true}
      (Stripe relivre tant qu'il ne reçoit pas de 2xx)
    """
    payload = await request.body()
    signature = request.headers.get("stripe-signature")
    verified = stripe_client.verify_webhook_signature(payload, signature, STRIPE_WEBHOOK_SECRET)
    if not verified.success:
        return PlainTextResponse(f"Webhook Error: {verified.error}", status_code=400)

    event = verified.get("event")
    try:
        handled = payments_service.handle_webhook_event(event)
        logger.info("payments.webhook event id=%s handled=%s", (event or {}).get("id"), handled)
    except Exception:
        logger.exception("Erreur dispatch webhook type=%s", (event or {}).get("type"))
    return {"received": True}

@router.get("/payment/{payment_id}")
async def get_payment(payment_id: str):
    """Détails d'un PaymentIntent: {id, amount, currency, status, created}."""
    result = await payments_service.get_payment(payment_id)
    if not result.success:
        raise VendorError(result.error or "Failed to retrieve payment")
    return {"success": True, "payment": result.get("paymentIntent")}

@router.get("/config")
def get_payment_config():
    """Clé publique Stripe destinée au widget de paiement côté client."""
    if not STRIPE_PUBLISHABLE_KEY:
        raise VendorError("Stripe publishable key is not configured")
    return {"success": True, "publishableKey": STRIPE_PUBLISHABLE_KEY}

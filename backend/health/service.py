from datetime import datetime, timezone
from typing import Any, Dict

from backend.config import (
    ENVIRONMENT,
    STRIPE_SECRET_KEY,
    STRIPE_WEBHOOK_SECRET,
    STRIPE_PUBLISHABLE_KEY,
)
from backend.uploads import cloudinary_client

def integrations_info() -> Dict[str, Any]:
    """État de configuration des intégrations (aucun appel réseau: les secrets ne sont jamais exposés)."""
    return {
        "stripe": {
            "secret_key": bool(STRIPE_SECRET_KEY),
            "webhook_secret": bool(STRIPE_WEBHOOK_SECRET),
            "publishable_key": bool(STRIPE_PUBLISHABLE_KEY),
        },
        "cloudinary": {"configured": cloudinary_client.is_configured()},
    }

def health_info() -> Dict[str, Any]:
    return {
        "success": True,
        "message": "Exotic API is running!",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": ENVIRONMENT,
        "integrations": integrations_info(),
    }

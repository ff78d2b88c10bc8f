"""
Lifespan FastAPI: initialisation/arrêt des ressources partagées.
- Configure les SDK fournisseurs (Stripe, Cloudinary) à partir de backend.config.
- Initialise FastAPILimiter (Redis) avec options de test (fakeredis).
- Variables d'environnement supportées:
  - DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS=1: désactive complètement (tests)
  - USE_FAKE_REDIS_FOR_TESTS=1: utilise fakeredis (tests)
  - LOCAL_RATE_LIMIT_FALLBACK=1: active un fallback local si l'init échoue
"""
import os
import logging
import redis.asyncio as aioredis
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi_limiter import FastAPILimiter

from backend.payments.stripe_client import require_stripe
from backend.uploads import cloudinary_client
from backend.health.service import integrations_info

try:
    from fakeredis.aioredis import FakeRedis  # tests only
except ImportError:
    FakeRedis = None

logger = logging.getLogger("uvicorn.error")

def configure_vendors() -> None:
    require_stripe()
    cloudinary_client.configure()
    integrations = integrations_info()
    if not integrations["stripe"]["secret_key"]:
        logger.warning("STRIPE_SECRET_KEY manquant: les appels Stripe échoueront")
    if not integrations["stripe"]["webhook_secret"]:
        logger.warning("STRIPE_WEBHOOK_SECRET manquant: tous les webhooks seront refusés (400)")
    if not integrations["cloudinary"]["configured"]:
        logger.warning("Identifiants Cloudinary incomplets: les uploads échoueront")

async def init_rate_limiter(app: FastAPI) -> None:
    """
    Configure le rate limiting et gère les fallbacks.
    - En cas d'échec de Redis et sans fallback, le rate limiting est désactivé proprement.
    """
    if os.getenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS") == "1":
        app.state.rate_limit_enabled = False
        logger.info("Rate limiting disabled by DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS")
        return
    try:
        if os.getenv("USE_FAKE_REDIS_FOR_TESTS") == "1":
            if not FakeRedis:
                raise RuntimeError("USE_FAKE_REDIS_FOR_TESTS=1 mais fakeredis n'est pas installé.")
            r = FakeRedis(decode_responses=True)
        else:
            redis_url = os.getenv("RATE_LIMIT_REDIS_URL", "redis://127.0.0.1:6379/0")
            r = aioredis.from_url(redis_url, encoding="utf-8", decode_responses=True)

        await FastAPILimiter.init(r)
        app.state.rate_limit_enabled = True
        logger.info("Rate limiting enabled")
    except Exception as e:
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            app.state.rate_limit_enabled = True
            logger.warning(f"Rate limiting falling back to local in-memory due to init error: {e}")
        else:
            app.state.rate_limit_enabled = False
            logger.warning(f"Rate limiting disabled due to init error: {e}")

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_vendors()
    await init_rate_limiter(app)
    yield

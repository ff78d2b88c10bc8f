"""
Application ASGI de l'API de la boutique Exotic (paiements Stripe, images Cloudinary, santé).

Cible des serveurs de production: `uvicorn backend.asgi:app` ou
`gunicorn -k uvicorn.workers.UvicornWorker backend.asgi:app`.
Les identifiants Stripe/Cloudinary sont lus au démarrage (backend.config, fichier .env);
une clé absente est signalée dans les logs et dans GET /api/health, sans bloquer le démarrage.
"""

from backend.app import app

__all__ = ["app"]

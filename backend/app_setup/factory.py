"""
Factory d'application recommandée pour les entrypoints (ex: backend.asgi).
Ordonne les étapes d'initialisation de manière lisible et testable.
"""
from fastapi import FastAPI
from .lifespan import lifespan
from .middlewares import register_basic_middlewares, register_force_https_middleware
from .security import register_security_middleware
from .exceptions import register_exception_handlers
from .routers import register_routers

def create_app() -> FastAPI:
    """
    Construit l'app FastAPI avec le lifespan et enregistre:
      - middlewares de base (CORS, TrustedHost) et en-têtes de sécurité
      - gestionnaires d'exceptions (enveloppe {success, message})
      - tous les routers (payments, uploads, health)
      - redirection HTTPS ajoutée en dernier pour s'exécuter en premier
    """
    app = FastAPI(title="Exotic Storefront API", lifespan=lifespan)
    register_basic_middlewares(app)
    register_security_middleware(app)
    register_exception_handlers(app)
    register_routers(app)
    register_force_https_middleware(app)
    return app

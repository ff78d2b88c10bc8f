"""
Middlewares transverses de l'application.
- register_basic_middlewares: CORS (front Vite) et TrustedHost.
- register_force_https_middleware: force la redirection HTTPS derrière un proxy.
Notes:
- L'ordre d'ajout est important: le middleware HTTPS est ajouté en dernier pour s'exécuter en premier.
"""
from fastapi import Request, FastAPI
from fastapi.responses import RedirectResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware

from backend.config import CORS_ORIGINS, ALLOWED_HOSTS, FORCE_HTTPS

def register_basic_middlewares(app: FastAPI) -> None:
    """
    - CORSMiddleware: autorise les origines du front (dev/prod), méthodes GET/POST/PUT/DELETE.
    - TrustedHostMiddleware: limite les hôtes acceptés (défense host header).
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=ALLOWED_HOSTS + ["*"] if "*" in CORS_ORIGINS else ALLOWED_HOSTS,
    )

def register_force_https_middleware(app: FastAPI) -> None:
    """Redirige HTTP -> HTTPS lorsqu'un proxy place x-forwarded-proto=http (uniquement si FORCE_HTTPS)."""
    @app.middleware("http")
    async def force_https(request: Request, call_next):
        if FORCE_HTTPS and request.headers.get("x-forwarded-proto") == "http":
            url = str(request.url).replace("http://", "https://", 1)
            return RedirectResponse(url, status_code=301)
        return await call_next(request)

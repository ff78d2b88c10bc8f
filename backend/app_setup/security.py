from fastapi import FastAPI
from backend.config import FORCE_HTTPS

def register_security_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def security_headers(request, call_next):
        response = await call_next(request)

        # En-têtes de sécurité
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")
        if FORCE_HTTPS:
            response.headers.setdefault("Strict-Transport-Security", "max-age=63072000; includeSubDomains; preload")

        # Pas de cache sur les réponses API (PaymentIntent, secrets client)
        if request.url.path.startswith("/api/payments"):
            response.headers["Cache-Control"] = "no-store"
        return response

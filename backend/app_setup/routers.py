"""
Registre central des routers.
- API: payments (/api/payments), uploads (/api/uploads)
- Health: /api/health
"""
from fastapi import FastAPI
from backend.payments import views as payments_views
from backend.uploads import views as uploads_views
from backend.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    app.include_router(payments_views.router)
    app.include_router(uploads_views.router)
    app.include_router(health_router)

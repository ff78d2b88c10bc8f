import hashlib
import hmac
import os
import time
import pytest
from typing import Generator, Dict, Any
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

# Pas de Redis pendant les tests: le limiter est désactivé avant l'import de l'app
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

import stripe
import cloudinary.api
import cloudinary.uploader

from backend.app import app as fastapi_app

WEBHOOK_SECRET = "whsec_test_secret"

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)
        elif "tests/functional/" in nodeid:
            item.add_marker(pytest.mark.functional)

@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

def sign_payload(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: int = None) -> str:
    """En-tête Stripe-Signature valide pour payload (schéma v1: HMAC-SHA256 de "<t>.<payload>")."""
    t = int(time.time()) if timestamp is None else timestamp
    signed = f"{t}.{payload.decode('utf-8')}".encode("utf-8")
    sig = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={t},v1={sig}"

@pytest.fixture
def webhook_secret(monkeypatch) -> str:
    monkeypatch.setattr("backend.payments.views.STRIPE_WEBHOOK_SECRET", WEBHOOK_SECRET)
    return WEBHOOK_SECRET

# --- Faux SDK Stripe ---

@pytest.fixture
def fake_intent() -> Dict[str, Any]:
    return {
        "id": "pi_test_123",
        "client_secret": "pi_test_123_secret_abc",
        "amount": 2599,
        "currency": "usd",
        "status": "requires_payment_method",
        "created": 1700000000,
    }

@pytest.fixture
def stripe_mocks(monkeypatch, fake_intent):
    """Remplace les points d'entrée Stripe utilisés par l'adaptateur; aucun appel réseau."""
    mocks = {
        "create": MagicMock(return_value=fake_intent),
        "retrieve": MagicMock(return_value=fake_intent),
    }
    monkeypatch.setattr(stripe.PaymentIntent, "create", mocks["create"])
    monkeypatch.setattr(stripe.PaymentIntent, "retrieve", mocks["retrieve"])
    return mocks

# --- Faux SDK Cloudinary ---

@pytest.fixture
def uploaded_asset() -> Dict[str, Any]:
    return {
        "secure_url": "https://res.cloudinary.com/demo/image/upload/v1/exotic-3d-printing/abc.jpg",
        "public_id": "exotic-3d-printing/abc",
        "format": "jpg",
        "bytes": 1234,
        "width": 800,
        "height": 600,
        "created_at": "2024-01-15T10:00:00Z",
    }

@pytest.fixture
def cloudinary_mocks(monkeypatch, uploaded_asset):
    mocks = {
        "upload": MagicMock(return_value=uploaded_asset),
        "destroy": MagicMock(return_value={"result": "ok"}),
        "resource": MagicMock(return_value=uploaded_asset),
        "ping": MagicMock(return_value={"status": "ok"}),
    }
    monkeypatch.setattr(cloudinary.uploader, "upload", mocks["upload"])
    monkeypatch.setattr(cloudinary.uploader, "destroy", mocks["destroy"])
    monkeypatch.setattr(cloudinary.api, "resource", mocks["resource"])
    monkeypatch.setattr(cloudinary.api, "ping", mocks["ping"])
    return mocks

# --- Catalogue d'exemple ---

@pytest.fixture
def catalog():
    from storefront.models import Product
    rows = [
        {"_id": "1", "title": "Geometric Desk Organizer", "description": "Keep your workspace tidy",
         "price": 24.99, "images": ["https://img.test/1.jpg"], "materials": "PLA", "category": "home-decor",
         "colors": ["Black", "White", "Gray"], "rating": 4.5, "reviews": 23, "createdAt": "2024-01-15"},
        {"_id": "2", "title": "Dragon Miniature", "description": "Hand-finished tabletop dragon",
         "price": 15.99, "images": ["https://img.test/2.jpg"], "materials": "Resin", "category": "miniatures",
         "colors": ["Black", "Red"], "rating": 4.9, "reviews": 67, "createdAt": "2024-02-01"},
        {"_id": "3", "title": "Articulated Phone Stand", "description": "Adjustable stand",
         "price": 12.99, "images": [], "materials": "PETG", "category": "gadgets",
         "colors": ["White"], "rating": 4.2, "reviews": 12, "createdAt": "2023-12-20"},
        {"_id": "4", "title": "Castle Tower Miniature", "description": "Modular terrain piece",
         "price": 34.99, "images": ["https://img.test/4.jpg"], "materials": "PLA", "category": "miniatures",
         "colors": ["Gray", "White"], "rating": 4.7, "reviews": 45, "createdAt": "2024-03-10"},
    ]
    return [Product.model_validate(r) for r in rows]

@pytest.fixture
def signer():
    return sign_payload

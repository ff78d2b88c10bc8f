# storefront.config
from pathlib import Path
import os
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=False)

def _clean_env(v: str) -> str:
    return (v or "").strip().strip("'").strip('"').strip("`")

def _float_env(name: str, default: float) -> float:
    raw = _clean_env(os.getenv(name) or "")
    try:
        return float(raw) if raw else default
    except ValueError:
        return default

# URL du backend (dev: uvicorn sur 8000)
STOREFRONT_API_URL = _clean_env(os.getenv("STOREFRONT_API_URL") or "http://localhost:8000").rstrip("/")
STOREFRONT_TIMEOUT = _float_env("STOREFRONT_TIMEOUT", 10.0)

# Dossier de persistance JSON du panier/favoris (vide => état de session uniquement)
STOREFRONT_STATE_DIR = _clean_env(os.getenv("STOREFRONT_STATE_DIR") or "")

# Clés de stockage (mêmes noms que le localStorage du front)
CART_STORAGE_KEY = "exotic-cart"
WISHLIST_STORAGE_KEY = "exotic-wishlist"
TOKEN_STORAGE_KEY = "exotic-token"

# backend.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=False)

"""
Configuration centrale du backend.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les secrets des deux intégrations (Stripe, Cloudinary)
- Expose les limites métier (montant minimum, taille/nombre d'images) et CORS/hosts
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _int_env(name: str, default: int) -> int:
    raw = _clean_env(os.getenv(name) or "")
    try:
        return int(raw) if raw else default
    except ValueError:
        return default

ENVIRONMENT = _clean_env(os.getenv("APP_ENV") or "development")

# CORS (dev: front Vite sur 5173)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h.strip()]
# Redirection HTTPS + HSTS derrière un proxy TLS
FORCE_HTTPS = (os.getenv("FORCE_HTTPS", "false").lower() == "true")

# Stripe: clé secrète, secret de signature webhook, clé publique (widget de paiement)
STRIPE_SECRET_KEY = _clean_env(os.getenv("STRIPE_SECRET_KEY") or "")
STRIPE_WEBHOOK_SECRET = _clean_env(os.getenv("STRIPE_WEBHOOK_SECRET") or "")
STRIPE_PUBLISHABLE_KEY = _clean_env(os.getenv("STRIPE_PUBLISHABLE_KEY") or os.getenv("VITE_STRIPE_PUBLISHABLE_KEY") or "")

# Paiements: montant minimum en plus petite unité (50 = 0,50 USD) et devise par défaut
PAYMENT_MIN_AMOUNT = _int_env("PAYMENT_MIN_AMOUNT", 50)
PAYMENT_DEFAULT_CURRENCY = _clean_env(os.getenv("PAYMENT_DEFAULT_CURRENCY") or "usd").lower()

# Cloudinary: identifiants du compte
CLOUDINARY_CLOUD_NAME = _clean_env(os.getenv("CLOUDINARY_CLOUD_NAME") or "")
CLOUDINARY_API_KEY = _clean_env(os.getenv("CLOUDINARY_API_KEY") or "")
CLOUDINARY_API_SECRET = _clean_env(os.getenv("CLOUDINARY_API_SECRET") or "")

# Uploads: dossier Cloudinary, taille max par fichier (octets), nombre max par lot
UPLOAD_FOLDER = _clean_env(os.getenv("UPLOAD_FOLDER") or "exotic-3d-printing")
UPLOAD_MAX_BYTES = _int_env("UPLOAD_MAX_BYTES", 5 * 1024 * 1024)
UPLOAD_MAX_FILES = _int_env("UPLOAD_MAX_FILES", 5)

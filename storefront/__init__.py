"""
Couche client de la boutique: état côté navigateur réexprimé en objets Python.
- api: client HTTP générique du backend (httpx)
- cart / wishlist / toasts / payment / auth: stores
- products / pages: filtrage catalogue et contrôleurs d'écran
"""
from .api import StorefrontApi, ApiClientError
from .cart import CartStore
from .wishlist import WishlistStore
from .toasts import ToastQueue
from .payment import PaymentSession
from .auth import AuthStore
from .context import StorefrontContext

__all__ = [
    "StorefrontApi",
    "ApiClientError",
    "CartStore",
    "WishlistStore",
    "ToastQueue",
    "PaymentSession",
    "AuthStore",
    "StorefrontContext",
]

"""
Assemblage des stores d'une session navigateur (équivalent de l'arbre de providers du front):
toasts -> api -> auth -> panier/favoris -> paiement.
Le stockage par défaut vient de STOREFRONT_STATE_DIR (absent => état de session uniquement).
"""
from dataclasses import dataclass
from typing import Optional

from .api import StorefrontApi
from .auth import AuthStore
from .cart import CartStore
from .payment import PaymentSession
from .storage import JsonStateStorage, default_storage
from .toasts import ToastQueue
from .wishlist import WishlistStore

_UNSET = object()


@dataclass
class StorefrontContext:
    api: StorefrontApi
    toasts: ToastQueue
    auth: AuthStore
    cart: CartStore
    wishlist: WishlistStore
    payment: PaymentSession

    @classmethod
    def create(cls, api: Optional[StorefrontApi] = None, storage=_UNSET) -> "StorefrontContext":
        store: Optional[JsonStateStorage] = default_storage() if storage is _UNSET else storage
        api = api or StorefrontApi()
        toasts = ToastQueue()
        return cls(
            api=api,
            toasts=toasts,
            auth=AuthStore(api, storage=store),
            cart=CartStore(storage=store),
            wishlist=WishlistStore(storage=store),
            payment=PaymentSession(api, toasts),
        )

    def close(self) -> None:
        self.toasts.clear()
        self.api.close()

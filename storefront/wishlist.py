"""
Liste de favoris: un produit au plus une fois, horodaté à l'ajout.
Mutations retournant le nouvel état, persistance optionnelle comme le panier.
"""
from datetime import datetime, timezone
from typing import Callable, Optional, Tuple

from .cart import ProductLike, as_product
from .config import WISHLIST_STORAGE_KEY
from .models import WishlistItem
from .storage import JsonStateStorage


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WishlistStore:
    def __init__(
        self,
        storage: Optional[JsonStateStorage] = None,
        key: str = WISHLIST_STORAGE_KEY,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._storage = storage
        self._key = key
        self._clock = clock
        self._items: Tuple[WishlistItem, ...] = ()
        if storage is not None:
            self._items = tuple(WishlistItem.from_dict(row) for row in storage.load(key, default=[]) or [])

    @property
    def items(self) -> Tuple[WishlistItem, ...]:
        return self._items

    def _commit(self, items) -> Tuple[WishlistItem, ...]:
        self._items = tuple(items)
        if self._storage is not None:
            self._storage.save(self._key, [item.to_dict() for item in self._items])
        return self._items

    def add(self, product: ProductLike) -> Tuple[WishlistItem, ...]:
        p = as_product(product)
        if self.contains(p.id):
            return self._items
        item = WishlistItem(
            id=p.id,
            title=p.title,
            price=p.price,
            added_at=self._clock(),
            category=p.category,
            image=p.image,
            description=p.description,
            materials=p.materials,
            colors=tuple(p.colors),
            rating=p.rating,
            reviews=p.reviews,
        )
        return self._commit(self._items + (item,))

    def remove(self, product_id: str) -> Tuple[WishlistItem, ...]:
        return self._commit(i for i in self._items if i.id != product_id)

    def clear(self) -> Tuple[WishlistItem, ...]:
        return self._commit(())

    def toggle(self, product: ProductLike) -> bool:
        """Ajoute ou retire; True si le produit vient d'être ajouté."""
        p = as_product(product)
        if self.contains(p.id):
            self.remove(p.id)
            return False
        self.add(p)
        return True

    def contains(self, product_id: str) -> bool:
        return any(i.id == product_id for i in self._items)

    @property
    def count(self) -> int:
        return len(self._items)

    def by_category(self, category: str) -> Tuple[WishlistItem, ...]:
        if category == "all":
            return self._items
        return tuple(i for i in self._items if i.category == category)

    def recently_added(self, limit: int = 5) -> Tuple[WishlistItem, ...]:
        return tuple(sorted(self._items, key=lambda i: i.added_at, reverse=True)[:limit])

"""
Panier: lignes indexées par (id produit, couleur choisie).
Chaque mutation retourne le nouvel état (tuple de CartItem immuables).
Totaux: livraison offerte au-delà de 50, sinon 5.99; TVA 8 %.
"""
import logging
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .config import CART_STORAGE_KEY
from .models import CartItem, Product
from .storage import JsonStateStorage

logger = logging.getLogger(__name__)

DEFAULT_COLOR = "Default"
FREE_SHIPPING_THRESHOLD = 50.0
STANDARD_SHIPPING = 5.99
TAX_RATE = 0.08

ProductLike = Union[Product, Mapping[str, Any]]


def as_product(product: ProductLike) -> Product:
    return product if isinstance(product, Product) else Product.model_validate(dict(product))


class CartStore:
    def __init__(self, storage: Optional[JsonStateStorage] = None, key: str = CART_STORAGE_KEY):
        self._storage = storage
        self._key = key
        self._items: Tuple[CartItem, ...] = ()
        if storage is not None:
            self._items = tuple(CartItem(**row) for row in storage.load(key, default=[]) or [])

    @property
    def items(self) -> Tuple[CartItem, ...]:
        return self._items

    def _commit(self, items) -> Tuple[CartItem, ...]:
        self._items = tuple(items)
        if self._storage is not None:
            self._storage.save(self._key, [item.to_dict() for item in self._items])
        return self._items

    def _find(self, product_id: str, color: str) -> Optional[CartItem]:
        return next((i for i in self._items if i.id == product_id and i.color == color), None)

    # --- Mutations ---

    def add(self, product: ProductLike, quantity: int = 1, color: Optional[str] = None) -> Tuple[CartItem, ...]:
        """Ajoute un produit; une ligne existante (même id, même couleur) voit sa quantité augmentée."""
        if quantity <= 0:
            raise ValueError("quantity must be positive")
        p = as_product(product)
        color = color or DEFAULT_COLOR
        existing = self._find(p.id, color)
        if existing is not None:
            bumped = CartItem(**{**existing.to_dict(), "quantity": existing.quantity + quantity})
            return self._commit(bumped if i is existing else i for i in self._items)
        item = CartItem(id=p.id, title=p.title, price=p.price, quantity=quantity, color=color, image=p.image)
        logger.debug("cart.add id=%s color=%s qty=%s", p.id, color, quantity)
        return self._commit(self._items + (item,))

    def remove(self, product_id: str, color: str = DEFAULT_COLOR) -> Tuple[CartItem, ...]:
        return self._commit(i for i in self._items if not (i.id == product_id and i.color == color))

    def update_quantity(self, product_id: str, quantity: int, color: str = DEFAULT_COLOR) -> Tuple[CartItem, ...]:
        # quantité <= 0 => suppression de la ligne
        if quantity <= 0:
            return self.remove(product_id, color)
        return self._commit(
            CartItem(**{**i.to_dict(), "quantity": quantity}) if (i.id == product_id and i.color == color) else i
            for i in self._items
        )

    def clear(self) -> Tuple[CartItem, ...]:
        return self._commit(())

    # --- Lecture ---

    def contains(self, product_id: str, color: str = DEFAULT_COLOR) -> bool:
        return self._find(product_id, color) is not None

    def quantity_of(self, product_id: str, color: str = DEFAULT_COLOR) -> int:
        item = self._find(product_id, color)
        return item.quantity if item else 0

    @property
    def items_count(self) -> int:
        return sum(i.quantity for i in self._items)

    @property
    def subtotal(self) -> float:
        return round(sum(i.line_total for i in self._items), 2)

    @property
    def shipping_cost(self) -> float:
        if not self._items or self.subtotal > FREE_SHIPPING_THRESHOLD:
            return 0.0
        return STANDARD_SHIPPING

    @property
    def tax(self) -> float:
        return round(self.subtotal * TAX_RATE, 2)

    @property
    def total(self) -> float:
        return round(self.subtotal + self.shipping_cost + self.tax, 2)

    def summary(self) -> Dict[str, float]:
        return {
            "subtotal": self.subtotal,
            "shipping": self.shipping_cost,
            "tax": self.tax,
            "total": self.total,
        }

"""
Contrôleurs d'écran: composent les stores sans rendu (le rendu, le routage et le CSS restent côté navigateur).
- ProductsPage: état des filtres du catalogue
- OrdersPage: vue en lecture seule des commandes, filtre par statut
- LoginPage: connexion / inscription avec toasts
- CheckoutPage: totaux, PaymentIntent puis enregistrement de la commande; panier vidé seulement si la commande est enregistrée
"""
import logging
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .api import ApiClientError, StorefrontApi
from .auth import AuthStore
from .cart import CartStore
from .models import Order, OrderStatus, Product
from .payment import PaymentSession
from .products import (
    ProductCriteria,
    SORTERS,
    category_counts,
    filter_products,
    has_active_filters,
)
from .toasts import ToastQueue

logger = logging.getLogger(__name__)


class ProductsPage:
    def __init__(self, products: Iterable[Product], criteria: Optional[ProductCriteria] = None):
        self.products: List[Product] = list(products)
        self.criteria = criteria or ProductCriteria()

    @property
    def visible(self) -> List[Product]:
        return filter_products(self.products, self.criteria)

    @property
    def categories(self) -> Dict[str, int]:
        return category_counts(self.products)

    @property
    def has_active_filters(self) -> bool:
        return has_active_filters(self.criteria)

    def set_search(self, term: str) -> None:
        self.criteria = replace(self.criteria, search=term)

    def set_category(self, category: str) -> None:
        self.criteria = replace(self.criteria, category=category)

    def toggle_material(self, material: str) -> None:
        self.criteria = replace(self.criteria, materials=self.criteria.materials ^ {material})

    def toggle_color(self, color: str) -> None:
        self.criteria = replace(self.criteria, colors=self.criteria.colors ^ {color})

    def set_price_range(self, low: float, high: float) -> None:
        if low > high:
            raise ValueError("price range lower bound exceeds upper bound")
        self.criteria = replace(self.criteria, price_range=(low, high))

    def set_sort(self, sort_by: str) -> None:
        if sort_by not in SORTERS:
            raise ValueError(f"unknown sort key: {sort_by!r}")
        self.criteria = replace(self.criteria, sort_by=sort_by)

    def clear_filters(self) -> None:
        # le tri choisi est conservé
        self.criteria = ProductCriteria(sort_by=self.criteria.sort_by)


# Affichage des statuts (libellé, couleur); statut inconnu => pending
ORDER_STATUS_INFO: Dict[str, Dict[str, str]] = {
    OrderStatus.PENDING.value: {"label": "Pending", "color": "#f59e0b"},
    OrderStatus.CONFIRMED.value: {"label": "Confirmed", "color": "#3b82f6"},
    OrderStatus.PROCESSING.value: {"label": "Processing", "color": "#8b5cf6"},
    OrderStatus.SHIPPED.value: {"label": "Shipped", "color": "#10b981"},
    OrderStatus.DELIVERED.value: {"label": "Delivered", "color": "#059669"},
    OrderStatus.CANCELLED.value: {"label": "Cancelled", "color": "#ef4444"},
}
ORDER_FILTERS = ("all",) + tuple(s.value for s in OrderStatus)


class OrdersPage:
    def __init__(self, orders: Sequence[Order] = (), toasts: Optional[ToastQueue] = None):
        self.orders: List[Order] = list(orders)
        self.toasts = toasts
        self.status_filter = "all"

    def load(self, api: StorefrontApi) -> List[Order]:
        """Récupère les commandes de l'utilisateur; en cas d'erreur la liste reste vide et un toast est affiché."""
        try:
            self.orders = [Order.model_validate(o) for o in api.list_orders()]
        except ApiClientError as e:
            logger.warning("orders.load failed status=%s", e.status_code)
            self.orders = []
            if self.toasts is not None:
                self.toasts.error(e.message or "Failed to load orders")
        return self.orders

    def set_filter(self, status: str) -> None:
        if status not in ORDER_FILTERS:
            raise ValueError(f"unknown order status filter: {status!r}")
        self.status_filter = status

    @property
    def visible(self) -> List[Order]:
        if self.status_filter == "all":
            return list(self.orders)
        return [o for o in self.orders if o.status == self.status_filter]

    @staticmethod
    def status_info(status: str) -> Dict[str, str]:
        return ORDER_STATUS_INFO.get(status, ORDER_STATUS_INFO[OrderStatus.PENDING.value])

    @property
    def empty_message(self) -> str:
        return "No orders yet" if self.status_filter == "all" else f"No {self.status_filter} orders"


class LoginPage:
    def __init__(self, auth: AuthStore, toasts: ToastQueue):
        self.auth = auth
        self.toasts = toasts
        self.is_login = True
        self.loading = False

    def toggle_mode(self) -> None:
        self.is_login = not self.is_login

    def submit(
        self,
        email: str,
        password: str,
        confirm_password: Optional[str] = None,
        first_name: str = "",
        last_name: str = "",
    ) -> bool:
        """Retourne True si la session est ouverte; sinon un toast d'erreur porte le message."""
        if not self.is_login and password != confirm_password:
            self.toasts.error("Passwords do not match")
            return False
        self.loading = True
        try:
            if self.is_login:
                result = self.auth.login(email, password)
            else:
                result = self.auth.register(first_name, last_name, email, password)
        finally:
            self.loading = False

        if not result["success"]:
            self.toasts.error(result["message"])
            return False
        name = (result.get("user") or {}).get("firstName") or ""
        if self.is_login:
            self.toasts.success(f"Welcome back, {name}!" if name else "Welcome back!")
        else:
            self.toasts.success(f"Welcome to Exotic, {name}!" if name else "Welcome to Exotic!")
        return True


EXPRESS_SHIPPING = 9.99
SHIPPING_METHODS = ("standard", "express")


class CheckoutPage:
    def __init__(
        self,
        cart: CartStore,
        auth: AuthStore,
        payment: PaymentSession,
        toasts: ToastQueue,
        shipping_method: str = "standard",
        currency: str = "usd",
    ):
        self.cart = cart
        self.auth = auth
        self.payment = payment
        self.toasts = toasts
        self.currency = currency
        self.processing = False
        self.set_shipping_method(shipping_method)

    def set_shipping_method(self, method: str) -> None:
        if method not in SHIPPING_METHODS:
            raise ValueError(f"unknown shipping method: {method!r}")
        self.shipping_method = method

    def totals(self) -> Dict[str, float]:
        subtotal = self.cart.subtotal
        shipping = EXPRESS_SHIPPING if self.shipping_method == "express" else self.cart.shipping_cost
        tax = self.cart.tax
        return {
            "subtotal": subtotal,
            "shipping": shipping,
            "tax": tax,
            "total": round(subtotal + shipping + tax, 2),
        }

    def amount_in_cents(self) -> int:
        return int(round(self.totals()["total"] * 100))

    def order_data(self, intent: Dict[str, Any], shipping_address: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Commande soumise au service des commandes: lignes du panier, livraison, totaux, PaymentIntent associé."""
        user = self.auth.user or {}
        address = dict(shipping_address or {})
        address.setdefault("firstName", user.get("firstName"))
        address.setdefault("lastName", user.get("lastName"))
        address.setdefault("email", user.get("email"))
        totals = self.totals()
        return {
            "items": [
                {
                    "product": item.id,
                    "title": item.title,
                    "price": item.price,
                    "quantity": item.quantity,
                    "selectedColor": item.color,
                    "image": item.image,
                }
                for item in self.cart.items
            ],
            "shippingAddress": address,
            "paymentMethod": "card",
            "shippingMethod": self.shipping_method,
            "subtotal": totals["subtotal"],
            "shippingCost": totals["shipping"],
            "tax": totals["tax"],
            "total": totals["total"],
            "paymentIntentId": intent.get("paymentIntentId"),
        }

    def place_order(self, shipping_address: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        """
        Crée le PaymentIntent pour le total du panier puis enregistre la commande.
        - panier vide ou utilisateur non connecté: toast d'erreur, aucun appel réseau
        - échec du PaymentIntent: toast déjà affiché par la session de paiement, panier conservé
        - échec de l'enregistrement de la commande: toast d'erreur, panier conservé
        - commande enregistrée: panier vidé, toast de confirmation, retour {clientSecret, paymentIntentId, order}
        """
        if not self.cart.items:
            self.toasts.error("Your cart is empty")
            return None
        if not self.auth.is_authenticated:
            self.toasts.error("Please log in to place an order")
            return None

        metadata = {
            "items": self.cart.items_count,
            "shipping_method": self.shipping_method,
            "email": (self.auth.user or {}).get("email"),
        }
        self.processing = True
        try:
            try:
                intent = self.payment.create_intent(self.amount_in_cents(), self.currency, metadata)
            except ApiClientError:
                return None
            try:
                order = self.payment.api.create_order(self.order_data(intent, shipping_address))
            except ApiClientError as e:
                logger.warning("checkout order submission failed intent=%s: %s", intent.get("paymentIntentId"), e.message)
                self.toasts.error(e.message or "Failed to place order. Please try again.")
                return None
        finally:
            self.processing = False

        self.cart.clear()
        self.toasts.success("Order placed successfully! Check your email for confirmation.")
        return {**intent, "order": order}

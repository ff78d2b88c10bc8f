"""Parcours complet côté client contre l'app FastAPI réelle (SDK fournisseurs simulés)."""
import json
from typing import Any, Dict
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from backend.app_setup.factory import create_app
from storefront.api import StorefrontApi, ApiClientError
from storefront.cart import CartStore
from storefront.pages import CheckoutPage, ProductsPage
from storefront.payment import PaymentSession
from storefront.toasts import ToastQueue
from storefront.wishlist import WishlistStore


@pytest.fixture
def toasts():
    q = ToastQueue()
    yield q
    q.clear()


@pytest.fixture
def api(client):
    # TestClient est un httpx.Client: injecté tel quel dans le client de la boutique
    return StorefrontApi(client=client, token="user-token")


@pytest.fixture
def recorded_orders():
    return []


@pytest.fixture
def shop_client(recorded_orders):
    # App complète + service de commandes minimal (hors de ce backend en production)
    shop = create_app()

    @shop.post("/api/orders", status_code=201)
    async def create_order(order: Dict[str, Any]):
        recorded_orders.append(order)
        return {"success": True, "order": {"_id": f"ord_{len(recorded_orders)}", "status": "pending", **order}}

    with TestClient(shop) as c:
        yield c


def _fill_cart(catalog) -> CartStore:
    products = ProductsPage(catalog)
    products.set_category("miniatures")
    products.set_sort("price-low")
    dragon, castle = products.visible

    cart = CartStore()
    cart.add(dragon, color="Red")
    cart.add(dragon, color="Red")
    cart.add(castle, color="Gray")
    return cart


def test_browse_wishlist_cart_checkout(toasts, catalog, stripe_mocks, webhook_secret, signer, shop_client, recorded_orders):
    products = ProductsPage(catalog)
    products.set_category("miniatures")
    wishlist = WishlistStore()
    assert wishlist.toggle(products.visible[-1]) is True

    cart = _fill_cart(catalog)
    assert cart.items_count == 3

    api = StorefrontApi(client=shop_client, token="user-token")
    auth = MagicMock(is_authenticated=True, user={"email": "ada@example.com", "firstName": "Ada"})
    payment = PaymentSession(api, toasts)
    page = CheckoutPage(cart, auth, payment, toasts)
    expected_cents = page.amount_in_cents()

    placed = page.place_order({"city": "Lyon"})
    assert placed["clientSecret"] == "pi_test_123_secret_abc"
    assert placed["order"]["_id"] == "ord_1"
    assert payment.payment_intent == {"clientSecret": "pi_test_123_secret_abc", "paymentIntentId": "pi_test_123"}
    assert stripe_mocks["create"].call_args.kwargs["amount"] == expected_cents
    assert cart.items == ()

    (order,) = recorded_orders
    assert order["paymentIntentId"] == "pi_test_123"
    assert [i["quantity"] for i in order["items"]] == [2, 1]
    assert round(order["total"] * 100) == expected_cents
    assert toasts.toasts[-1].message == "Order placed successfully! Check your email for confirmation."

    # Stripe confirme ensuite le paiement via le webhook signé
    payload = json.dumps({
        "id": "evt_ok",
        "type": "payment_intent.succeeded",
        "data": {"object": {"id": placed["paymentIntentId"], "amount": expected_cents}},
    }).encode()
    r = shop_client.post("/api/payments/webhook", content=payload, headers={"stripe-signature": signer(payload)})
    assert r.json() == {"received": True}


def test_cart_survives_when_order_is_not_recorded(api, toasts, catalog, stripe_mocks):
    # ce backend n'expose pas /api/orders: le PaymentIntent existe mais aucune commande n'est enregistrée
    cart = _fill_cart(catalog)
    auth = MagicMock(is_authenticated=True, user={"email": "ada@example.com"})
    payment = PaymentSession(api, toasts)
    page = CheckoutPage(cart, auth, payment, toasts)

    assert page.place_order() is None
    assert payment.status() == "requires_payment_method"
    assert cart.items_count == 3
    assert [t.type for t in toasts.toasts] == ["error"]


def test_server_validation_message_reaches_toast(api, toasts, stripe_mocks):
    payment = PaymentSession(api, toasts)
    with pytest.raises(ApiClientError) as exc:
        payment.create_intent(25)
    assert exc.value.status_code == 400
    assert toasts.toasts[-1].type == "error"
    assert "at least 50" in toasts.toasts[-1].message
    stripe_mocks["create"].assert_not_called()


def test_image_lifecycle_through_client(api, cloudinary_mocks):
    uploaded = api.upload_image("vase.png", b"png-bytes", "image/png")
    public_id = uploaded["public_id"]
    assert api.get_image(public_id)["public_id"] == public_id

    cloudinary_mocks["destroy"].side_effect = [{"result": "ok"}, {"result": "not found"}]
    assert api.delete_image(public_id)["success"] is True
    with pytest.raises(ApiClientError) as exc:
        api.delete_image(public_id)
    assert exc.value.status_code == 404

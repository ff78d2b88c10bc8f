from unittest.mock import MagicMock

import pytest

from storefront.api import ApiClientError
from storefront.cart import CartStore
from storefront.models import Order
from storefront.pages import CheckoutPage, LoginPage, OrdersPage, ProductsPage
from storefront.toasts import ToastQueue


@pytest.fixture
def toasts():
    q = ToastQueue()
    yield q
    q.clear()


def messages(toasts):
    return [(t.type, t.message) for t in toasts.toasts]


def test_products_page_toggles_and_clear(catalog):
    page = ProductsPage(catalog)
    page.set_category("miniatures")
    page.toggle_color("Red")
    assert [p.id for p in page.visible] == ["2"]
    page.toggle_color("Red")
    assert len(page.visible) == 2
    page.set_sort("price-low")
    page.clear_filters()
    assert not page.has_active_filters
    assert page.criteria.sort_by == "price-low"
    with pytest.raises(ValueError):
        page.set_price_range(50, 10)


def test_orders_page_filter_and_status_fallback():
    orders = [
        Order.model_validate({"_id": "o1", "status": "shipped", "total": 30}),
        Order.model_validate({"_id": "o2", "status": "pending", "total": 12}),
        Order.model_validate({"_id": "o3", "status": "lost-in-space", "total": 5}),
    ]
    page = OrdersPage(orders)
    page.set_filter("shipped")
    assert [o.id for o in page.visible] == ["o1"]
    page.set_filter("cancelled")
    assert page.visible == []
    assert page.empty_message == "No cancelled orders"
    assert OrdersPage.status_info("lost-in-space") == OrdersPage.status_info("pending")
    with pytest.raises(ValueError):
        page.set_filter("refunded")


def test_orders_page_load_error_toasts(toasts):
    api = MagicMock()
    api.list_orders.side_effect = ApiClientError("Access denied", 401)
    page = OrdersPage(toasts=toasts)
    assert page.load(api) == []
    assert messages(toasts) == [("error", "Access denied")]


def test_login_page_password_mismatch(toasts):
    auth = MagicMock()
    page = LoginPage(auth, toasts)
    page.toggle_mode()
    assert page.submit("a@b.test", "secret1", confirm_password="secret2") is False
    auth.register.assert_not_called()
    assert messages(toasts) == [("error", "Passwords do not match")]


def test_login_page_welcome(toasts):
    auth = MagicMock()
    auth.login.return_value = {"success": True, "user": {"firstName": "Ada"}}
    assert LoginPage(auth, toasts).submit("a@b.test", "secret") is True
    assert messages(toasts) == [("success", "Welcome back, Ada!")]


def _checkout(catalog, toasts, authenticated=True, payment=None):
    cart = CartStore()
    cart.add(catalog[0])  # 24.99
    auth = MagicMock(is_authenticated=authenticated, user={"email": "a@b.test"})
    payment = payment or MagicMock()
    return CheckoutPage(cart, auth, payment, toasts), cart, payment


def test_checkout_totals_express(catalog, toasts):
    page, _, _ = _checkout(catalog, toasts)
    assert page.totals()["shipping"] == 5.99
    page.set_shipping_method("express")
    totals = page.totals()
    assert totals["shipping"] == 9.99
    assert totals["total"] == round(24.99 + 9.99 + 2.0, 2)
    assert page.amount_in_cents() == 3698


def test_checkout_requires_login(catalog, toasts):
    page, cart, payment = _checkout(catalog, toasts, authenticated=False)
    assert page.place_order() is None
    payment.create_intent.assert_not_called()
    assert len(cart.items) == 1
    assert messages(toasts) == [("error", "Please log in to place an order")]


def test_checkout_success_clears_cart(catalog, toasts):
    page, cart, payment = _checkout(catalog, toasts)
    payment.create_intent.return_value = {"clientSecret": "cs", "paymentIntentId": "pi"}
    payment.api.create_order.return_value = {"_id": "ord_1", "status": "pending"}
    placed = page.place_order({"city": "Lyon"})
    assert placed["paymentIntentId"] == "pi"
    assert placed["order"]["_id"] == "ord_1"
    order = payment.api.create_order.call_args.args[0]
    assert order["paymentIntentId"] == "pi"
    assert order["shippingMethod"] == "standard"
    assert order["total"] == 32.98
    assert order["shippingAddress"] == {"city": "Lyon", "firstName": None, "lastName": None, "email": "a@b.test"}
    assert order["items"] == [{
        "product": "1", "title": "Geometric Desk Organizer", "price": 24.99, "quantity": 1,
        "selectedColor": "Default", "image": "https://img.test/1.jpg",
    }]
    amount, currency, metadata = payment.create_intent.call_args.args
    assert amount == 3298 and currency == "usd"
    assert metadata["items"] == 1
    assert cart.items == ()
    assert messages(toasts)[0][0] == "success"


def test_checkout_payment_failure_keeps_cart(catalog, toasts):
    payment = MagicMock()
    payment.create_intent.side_effect = ApiClientError("card declined", 500)
    page, cart, _ = _checkout(catalog, toasts, payment=payment)
    assert page.place_order() is None
    assert len(cart.items) == 1
    payment.api.create_order.assert_not_called()


def test_checkout_order_rejected_keeps_cart(catalog, toasts):
    page, cart, payment = _checkout(catalog, toasts)
    payment.create_intent.return_value = {"clientSecret": "cs", "paymentIntentId": "pi"}
    payment.api.create_order.side_effect = ApiClientError("Order service unavailable", 503)
    assert page.place_order() is None
    assert len(cart.items) == 1
    assert page.processing is False
    assert messages(toasts) == [("error", "Order service unavailable")]


def test_checkout_order_rejected_without_message(catalog, toasts):
    page, cart, payment = _checkout(catalog, toasts)
    payment.create_intent.return_value = {"clientSecret": "cs", "paymentIntentId": "pi"}
    payment.api.create_order.side_effect = ApiClientError("", None)
    assert page.place_order() is None
    assert len(cart.items) == 1
    assert messages(toasts) == [("error", "Failed to place order. Please try again.")]

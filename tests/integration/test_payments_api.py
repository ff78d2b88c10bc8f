import stripe
from unittest.mock import MagicMock


def test_create_intent_success(client, stripe_mocks):
    r = client.post("/api/payments/create-intent", json={"amount": 2599, "metadata": {"cart": 2}})
    assert r.status_code == 200
    assert r.json() == {"success": True, "clientSecret": "pi_test_123_secret_abc", "paymentIntentId": "pi_test_123"}
    assert stripe_mocks["create"].call_args.kwargs["metadata"] == {"cart": "2"}


def test_create_intent_small_amount_is_400_without_vendor_call(client, stripe_mocks):
    for body in ({"amount": 49}, {}, {"amount": 0}):
        r = client.post("/api/payments/create-intent", json=body)
        assert r.status_code == 400
        assert r.json()["success"] is False
        assert "50" in r.json()["message"]
    stripe_mocks["create"].assert_not_called()


def test_create_intent_malformed_body_is_400(client, stripe_mocks):
    r = client.post("/api/payments/create-intent", json={"amount": "lots"})
    assert r.status_code == 400
    assert r.json()["success"] is False
    stripe_mocks["create"].assert_not_called()


def test_create_intent_vendor_failure_is_500(client, monkeypatch):
    monkeypatch.setattr(stripe.PaymentIntent, "create", MagicMock(side_effect=RuntimeError("stripe down")))
    r = client.post("/api/payments/create-intent", json={"amount": 5000})
    assert r.status_code == 500
    assert r.json() == {"success": False, "message": "stripe down"}


def test_get_payment(client, stripe_mocks):
    r = client.get("/api/payments/payment/pi_test_123")
    assert r.status_code == 200
    payment = r.json()["payment"]
    assert set(payment) == {"id", "amount", "currency", "status", "created"}
    assert "client_secret" not in payment


def test_get_payment_vendor_failure(client, monkeypatch):
    monkeypatch.setattr(stripe.PaymentIntent, "retrieve", MagicMock(side_effect=RuntimeError("No such payment_intent")))
    r = client.get("/api/payments/payment/pi_missing")
    assert r.status_code == 500
    assert r.json()["message"] == "No such payment_intent"


def test_payment_config(client, monkeypatch):
    monkeypatch.setattr("backend.payments.views.STRIPE_PUBLISHABLE_KEY", "pk_test_123")
    assert client.get("/api/payments/config").json() == {"success": True, "publishableKey": "pk_test_123"}

    monkeypatch.setattr("backend.payments.views.STRIPE_PUBLISHABLE_KEY", "")
    r = client.get("/api/payments/config")
    assert r.status_code == 500
    assert r.json()["success"] is False

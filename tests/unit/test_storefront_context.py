from storefront.context import StorefrontContext
from storefront.api import StorefrontApi
from storefront.storage import JsonStateStorage


def test_session_only_by_default(monkeypatch, catalog):
    monkeypatch.setattr("storefront.storage.STOREFRONT_STATE_DIR", "")
    ctx = StorefrontContext.create(api=StorefrontApi(base_url="http://api.test"))
    ctx.cart.add(catalog[0])
    ctx.close()

    fresh = StorefrontContext.create(api=StorefrontApi(base_url="http://api.test"))
    assert fresh.cart.items == ()
    fresh.close()


def test_state_dir_restores_cart_and_wishlist(monkeypatch, tmp_path, catalog):
    monkeypatch.setattr("storefront.storage.STOREFRONT_STATE_DIR", str(tmp_path))
    ctx = StorefrontContext.create(api=StorefrontApi(base_url="http://api.test"))
    ctx.cart.add(catalog[1], color="Red")
    ctx.wishlist.add(catalog[2])
    ctx.close()

    restored = StorefrontContext.create(api=StorefrontApi(base_url="http://api.test"))
    assert restored.cart.quantity_of("2", "Red") == 1
    assert restored.wishlist.contains("3")
    assert restored.payment.toasts is restored.toasts
    restored.close()


def test_explicit_storage_wins(tmp_path, catalog):
    storage = JsonStateStorage(tmp_path / "custom")
    ctx = StorefrontContext.create(api=StorefrontApi(base_url="http://api.test"), storage=storage)
    ctx.cart.add(catalog[0])
    assert storage.load("exotic-cart")[0]["id"] == "1"
    ctx.close()

"""
Тесты сессии витрины: снимок каталога, обновление по изменениям, заказ.
"""

import pytest

from storefront.db.database import SessionLocal
from storefront.db.models import Product
from storefront.services import gateway as gw
from storefront.services.checkout import BlankCustomerNameError
from storefront.services.gateway import CatalogGateway
from storefront.services.storefront import (
    ProductNotFound,
    SessionNotFound,
    StorefrontRegistry,
    StorefrontSession,
)


@pytest.fixture
def registry(gateway):
    registry = StorefrontRegistry(gateway)
    yield registry
    registry.close_all()


def test_open_session_loads_catalog(registry, catalog):
    session = registry.create()

    assert session.is_open
    assert [c.id for c in session.view().categories_to_show] == ["c1", "c2"]
    assert session.snapshot.whatsapp_number == "5511988887777"


def test_session_sees_changes_after_commit(registry, catalog):
    session = registry.create()
    assert session.snapshot.product("p9") is None

    with SessionLocal() as db:
        db.add(Product(id="p9", name="Skol", price="4", category_id="c2"))
        db.commit()

    assert session.snapshot.product("p9").name == "Skol"


def test_filters(registry, catalog):
    session = registry.create()
    session.set_filters("heineken", None)

    view = session.view()
    assert [p.id for p in view.filtered_products] == ["p1"]

    session.set_filters("", "c2")
    assert [c.id for c in session.view().categories_to_show] == ["c2"]


def test_add_to_cart(registry, catalog):
    session = registry.create()

    assert session.add_to_cart("p1")
    assert not session.add_to_cart("p2")
    with pytest.raises(ProductNotFound):
        session.add_to_cart("missing")

    assert [line.product_id for line in session.cart] == ["p1"]


def test_cart_line_keeps_price_after_product_edit(registry, catalog):
    session = registry.create()
    session.add_to_cart("p1")

    with SessionLocal() as db:
        gw.upsert_product(db, {"price": "abc"}, "p1")

    # Снимок обновился, строка корзины осталась со старой ценой
    assert session.snapshot.product("p1").price == "abc"
    assert session.cart.get("p1").product.price == "9,90"
    assert session.cart.total() == pytest.approx(9.9)


def test_checkout_clears_cart_and_name(registry, catalog):
    session = registry.create()
    session.add_to_cart("p1")
    session.customer_name = "Ana"

    handoff = session.checkout()

    assert "phone=5511988887777" in handoff.url
    assert "*Cliente:* Ana" in handoff.message
    assert session.cart.is_empty
    assert session.customer_name == ""


def test_blank_name_leaves_cart(registry, catalog):
    session = registry.create()
    session.add_to_cart("p1")

    with pytest.raises(BlankCustomerNameError):
        session.checkout("   ")

    assert len(session.cart) == 1


def test_close_unsubscribes(registry, gateway, catalog):
    before = len(gateway.notifier)
    session = registry.create()
    assert len(gateway.notifier) == before + 1

    registry.close(session.id)

    assert len(gateway.notifier) == before
    assert not session.is_open
    with pytest.raises(SessionNotFound):
        registry.get(session.id)
    with pytest.raises(SessionNotFound):
        registry.close(session.id)


def test_close_all(registry, catalog):
    registry.create()
    registry.create()
    assert len(registry) == 2

    registry.close_all()
    assert len(registry) == 0


class RenamingGateway(CatalogGateway):
    """Шлюз, в котором админ переименовывает товар прямо во время чтения."""

    renamed = False

    def fetch_snapshot(self):
        snapshot = super().fetch_snapshot()
        if not self.renamed:
            self.renamed = True
            with SessionLocal() as db:
                gw.upsert_product(db, {"name": "Heineken Zero"}, "p1")
        return snapshot


def test_change_during_refresh_is_not_lost(catalog):
    gateway = RenamingGateway(SessionLocal)
    session = StorefrontSession("s1", gateway).open()
    try:
        names = [p.name for p in session.snapshot.products]
        assert "Heineken Zero" in names
    finally:
        session.close()
        gateway.close()


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_idle_sessions_expire(gateway, catalog):
    clock = FakeClock()
    registry = StorefrontRegistry(gateway, idle_minutes=30, clock=clock)
    idle = registry.create()
    active = registry.create()
    assert len(gateway.notifier) == 2

    clock.now += 20 * 60
    registry.get(active.id)
    clock.now += 15 * 60

    fresh = registry.create()

    assert len(registry) == 2
    assert not idle.is_open
    assert idle.cart.is_empty
    assert len(gateway.notifier) == 2
    with pytest.raises(SessionNotFound):
        registry.get(idle.id)
    assert registry.get(active.id) is active
    assert registry.get(fresh.id) is fresh


def test_expire_idle_reports_closed_sessions(gateway):
    clock = FakeClock()
    registry = StorefrontRegistry(gateway, idle_minutes=1, clock=clock)
    registry.create()
    registry.create()

    clock.now += 61

    assert registry.expire_idle() == 2
    assert len(registry) == 0
    assert len(gateway.notifier) == 0


def test_zero_idle_minutes_disables_expiry(gateway):
    clock = FakeClock()
    registry = StorefrontRegistry(gateway, idle_minutes=0, clock=clock)
    session = registry.create()

    clock.now += 10**6

    assert registry.expire_idle() == 0
    assert registry.get(session.id) is session
    registry.close_all()

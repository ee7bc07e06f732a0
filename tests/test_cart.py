"""
Тесты корзины: добавление, количество, итог.
"""

import pytest

from conftest import make_product
from storefront.services.cart import Cart


def test_add_new_product_creates_line():
    cart = Cart()

    assert cart.add(make_product("p1", "9,90"))
    assert len(cart) == 1
    assert cart.get("p1").quantity == 1


def test_add_same_product_increments_in_place():
    cart = Cart()
    cart.add(make_product("p1", "10"))
    cart.add(make_product("p2", "5"))
    cart.add(make_product("p1", "10"))

    assert [line.product_id for line in cart] == ["p1", "p2"]
    assert cart.get("p1").quantity == 2


@pytest.mark.parametrize("price", ["", "0", "0,00", "-3", "abc"])
def test_add_without_valid_price_is_noop(price):
    cart = Cart()
    cart.add(make_product("p1", "9,90"))

    assert cart.add(make_product("p2", price)) is False
    assert [line.product_id for line in cart] == ["p1"]
    assert cart.get("p1").quantity == 1


def test_update_quantity():
    cart = Cart()
    cart.add(make_product("p1", "10"))

    assert cart.update_quantity("p1", 2)
    assert cart.get("p1").quantity == 3

    assert cart.update_quantity("p1", -1)
    assert cart.get("p1").quantity == 2


def test_quantity_reaching_zero_removes_line():
    cart = Cart()
    cart.add(make_product("p1", "10"))
    cart.add(make_product("p2", "5"))

    cart.update_quantity("p1", -1)

    assert "p1" not in cart
    assert [line.product_id for line in cart] == ["p2"]


def test_large_negative_delta_removes_line():
    cart = Cart()
    cart.add(make_product("p1", "10"))
    cart.add(make_product("p1", "10"))

    cart.update_quantity("p1", -5)

    assert cart.is_empty


def test_update_unknown_product_is_noop():
    cart = Cart()
    cart.add(make_product("p1", "10"))

    assert cart.update_quantity("missing", 1) is False
    assert len(cart) == 1


def test_total():
    cart = Cart()
    cart.add(make_product("p1", "10,00"))
    cart.add(make_product("p1", "10,00"))
    cart.add(make_product("p2", "5.50"))

    assert cart.total() == pytest.approx(25.5)


def test_total_of_empty_cart_is_zero():
    assert Cart().total() == 0


def test_total_ignores_line_with_unparsable_price():
    cart = Cart()
    cart.add(make_product("p1", "10"))
    cart.add(make_product("p2", "4"))

    # Строка с ценой, ставшей нечитаемой после добавления
    line = cart.get("p2")
    line.product = line.product.model_copy(update={"price": "abc"})

    assert cart.total() == pytest.approx(10.0)


def test_remove_and_clear():
    cart = Cart()
    cart.add(make_product("p1", "10"))
    cart.add(make_product("p2", "5"))

    assert cart.remove("p1")
    assert not cart.remove("p1")
    assert len(cart) == 1

    cart.clear()
    assert cart.is_empty
    assert cart.total() == 0

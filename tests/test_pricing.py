import math

import pytest

from storefront.services.pricing import (
    format_amount,
    format_price,
    is_valid_price,
    parse_price,
    price_or_zero,
)


@pytest.mark.parametrize("raw", ["9,90", "10.5", " 3 ", "0,01", 7, 2.5])
def test_valid_prices(raw):
    assert is_valid_price(raw)


@pytest.mark.parametrize(
    "raw",
    ["", "   ", None, "0", "0,00", "-1", "-2,50", "abc", "R$ 5", "inf", "nan", "Infinity"],
)
def test_invalid_prices(raw):
    assert not is_valid_price(raw)


def test_comma_is_decimal_separator():
    assert parse_price("9,90") == pytest.approx(9.9)
    assert parse_price(" 12,5 ") == pytest.approx(12.5)


def test_unparsable_price_is_nan():
    assert math.isnan(parse_price("abc"))
    assert math.isnan(parse_price(""))
    assert math.isnan(parse_price(None))


def test_price_or_zero_never_nan():
    assert price_or_zero("abc") == 0.0
    assert price_or_zero("0") == 0.0
    assert price_or_zero("5,50") == pytest.approx(5.5)


def test_format_price():
    assert format_price("9,9") == "R$ 9,90"
    assert format_price("1234.5") == "R$ 1234,50"
    assert format_price("") == "Consulte"
    assert format_price("abc") == "Consulte"


def test_format_price_overrides():
    assert format_price("3", currency="US$") == "US$ 3,00"
    assert format_price("0", unavailable="n/a") == "n/a"


def test_format_amount():
    assert format_amount(25.5) == "R$ 25,50"
    assert format_amount(0) == "R$ 0,00"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("10 reais", 10.0),
        ("9,90 un", 9.9),
        ("12abc", 12.0),
        ("1_000", 1.0),
        ("5.", 5.0),
        (".5", 0.5),
        ("2e1", 20.0),
    ],
)
def test_leading_number_is_parsed(raw, expected):
    assert parse_price(raw) == pytest.approx(expected)
    assert is_valid_price(raw)


def test_text_after_number_keeps_label():
    assert format_price("9,90 un") == "R$ 9,90"


@pytest.mark.parametrize("raw", ["un 9,90", "1e999", "-10 reais", ".", "+"])
def test_prefix_without_positive_finite_number(raw):
    assert not is_valid_price(raw)

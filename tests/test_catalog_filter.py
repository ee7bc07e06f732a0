"""
Тесты фильтрации каталога по поиску и категории.
"""

from conftest import make_product
from storefront.schemas.catalog import CategoryOut
from storefront.services.catalog_filter import filter_catalog, sort_categories

BEER = CategoryOut(id="c1", name="Cervejas", order=1)
WINE = CategoryOut(id="c2", name="Vinhos", order=2)
SPIRITS = CategoryOut(id="c3", name="Destilados", order=3)

PRODUCTS = [
    make_product("p1", "9,90", "Heineken", "c1"),
    make_product("p2", "", "Heineken Zero", "c1"),
    make_product("p3", "45", "Vinho Tinto", "c2"),
    make_product("p4", "80", "Cachaça", "c3"),
]


def _ids(items):
    return [item.id for item in items]


def test_no_filters_shows_everything_in_order():
    view = filter_catalog([WINE, SPIRITS, BEER], PRODUCTS)

    assert _ids(view.categories_to_show) == ["c1", "c2", "c3"]
    assert _ids(view.filtered_products) == ["p1", "p2", "p3", "p4"]


def test_search_is_case_insensitive_substring():
    view = filter_catalog([BEER, WINE, SPIRITS], PRODUCTS, search_term="heINEK")

    assert _ids(view.filtered_products) == ["p1", "p2"]
    assert _ids(view.categories_to_show) == ["c1"]


def test_search_without_matches_hides_all_sections():
    view = filter_catalog([BEER, WINE], PRODUCTS, search_term="whisky")

    assert view.categories_to_show == []
    assert view.filtered_products == []


def test_selected_category_limits_sections_and_products():
    view = filter_catalog([BEER, WINE, SPIRITS], PRODUCTS, selected_category_id="c2")

    assert _ids(view.categories_to_show) == ["c2"]
    assert _ids(view.filtered_products) == ["p3"]


def test_selected_category_combined_with_search():
    view = filter_catalog(
        [BEER, WINE], PRODUCTS, search_term="vinho", selected_category_id="c1"
    )

    assert view.categories_to_show == []
    assert view.filtered_products == []


def test_empty_category_is_hidden():
    empty = CategoryOut(id="c9", name="Gelo", order=0)

    view = filter_catalog([empty, BEER], PRODUCTS[:2])

    assert _ids(view.categories_to_show) == ["c1"]


def test_sections_group_products_by_category():
    view = filter_catalog([BEER, WINE], PRODUCTS[:3])

    sections = view.sections()
    assert list(sections) == ["c1", "c2"]
    assert _ids(sections["c1"]) == ["p1", "p2"]
    assert _ids(sections["c2"]) == ["p3"]


def test_product_without_known_category_has_no_section():
    orphan = make_product("p9", "3", "Água", "deleted")

    view = filter_catalog([BEER], [PRODUCTS[0], orphan])

    assert _ids(view.categories_to_show) == ["c1"]
    assert all("p9" not in _ids(products) for products in view.sections().values())


def test_sort_is_stable_and_missing_order_counts_as_zero():
    a = CategoryOut(id="a", name="A", order=2)
    b = CategoryOut(id="b", name="B", order=1)
    c = CategoryOut(id="c", name="C", order=1)
    d = CategoryOut(id="d", name="D", order=None)

    assert _ids(sort_categories([a, b, c, d])) == ["d", "b", "c", "a"]

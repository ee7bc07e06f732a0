"""
Преобразование состояния сервисов в ответы API.
"""

from typing import Optional

from storefront.schemas.catalog import ProductOut
from storefront.schemas.storefront import (
    CartLineOut,
    CartOut,
    CatalogPage,
    CatalogSection,
    ProductCard,
)
from storefront.services.cart import Cart
from storefront.services.catalog_filter import filter_catalog, sort_categories
from storefront.services.gateway import CatalogSnapshot
from storefront.services.pricing import format_amount, format_price, is_valid_price

STATUS_READY = "ready"
STATUS_CONFIGURATION_REQUIRED = "configuration_required"


def product_card(product: ProductOut) -> ProductCard:
    return ProductCard(
        id=product.id,
        name=product.name,
        price=product.price,
        price_label=format_price(product.price),
        purchasable=is_valid_price(product.price),
        category_id=product.category_id,
        description=product.description,
    )


def catalog_page(
    snapshot: CatalogSnapshot,
    search_term: str = "",
    selected_category_id: Optional[str] = None,
) -> CatalogPage:
    """
    Страница каталога по снимку и фильтрам.

    Args:
        snapshot: Снимок каталога
        search_term: Строка поиска
        selected_category_id: Выбранная категория

    Returns:
        CatalogPage: Разделы с товарами, категории для вкладок и статус
    """
    view = filter_catalog(
        snapshot.categories, snapshot.products, search_term, selected_category_id
    )
    return CatalogPage(
        status=STATUS_READY if snapshot.available else STATUS_CONFIGURATION_REQUIRED,
        whatsapp_number=snapshot.whatsapp_number,
        logo_url=snapshot.logo_url,
        search_term=search_term or "",
        selected_category_id=selected_category_id,
        categories=sort_categories(snapshot.categories),
        sections=[
            CatalogSection(
                category=category,
                products=[product_card(p) for p in view.products_for(category.id)],
            )
            for category in view.categories_to_show
        ],
    )


def cart_out(cart: Cart) -> CartOut:
    total = cart.total()
    return CartOut(
        lines=[
            CartLineOut(
                product_id=line.product_id,
                name=line.product.name,
                price=line.product.price,
                price_label=format_price(line.product.price),
                quantity=line.quantity,
                line_total=round(line.line_total, 2),
            )
            for line in cart
        ],
        items_count=len(cart),
        total=round(total, 2),
        total_label=format_amount(total),
    )

"""
API endpoints для работы с товарами.

Поиск по названию и фильтр по категории работают так же, как на
витрине: товары без валидной цены видны, но не покупаются.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.api.deps import get_gateway
from storefront.api.v1.presenters import product_card
from storefront.schemas.storefront import ProductCard
from storefront.services.catalog_filter import filter_catalog
from storefront.services.gateway import CatalogGateway

router = APIRouter()


@router.get("", response_model=List[ProductCard])
def list_products(
    gateway: CatalogGateway = Depends(get_gateway),
    q: Optional[str] = Query(None, description="Поиск по названию (без учета регистра)"),
    category_id: Optional[str] = Query(None, description="Фильтр по категории"),
):
    """
    Получить список товаров с фильтрацией.

    Args:
        gateway: Шлюз каталога
        q: Поисковый запрос по названию
        category_id: Фильтр по ID категории

    Returns:
        List[ProductCard]: Товары с подписью цены и признаком доступности
    """
    snapshot = gateway.fetch_snapshot()
    if not snapshot.available:
        raise HTTPException(503, detail="Catalog storage is not provisioned")
    view = filter_catalog(snapshot.categories, snapshot.products, q or "", category_id)
    return [product_card(p) for p in view.filtered_products]


@router.get("/{product_id}", response_model=ProductCard)
def get_product(product_id: str, gateway: CatalogGateway = Depends(get_gateway)):
    """
    Получить товар по ID.

    Raises:
        HTTPException: Если товар не найден
    """
    snapshot = gateway.fetch_snapshot()
    product = snapshot.product(product_id)
    if product is None:
        raise HTTPException(404, detail="Product not found")
    return product_card(product)

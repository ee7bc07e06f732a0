"""
API endpoints для работы с категориями товаров.

Содержит операции для получения списка категорий и
информации о конкретных категориях.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from storefront.api.deps import get_gateway
from storefront.schemas.catalog import CategoryOut
from storefront.services.catalog_filter import sort_categories
from storefront.services.gateway import UNAVAILABLE, CatalogGateway

router = APIRouter()


def _load(gateway: CatalogGateway) -> List[CategoryOut]:
    categories = gateway.fetch_categories()
    if categories is UNAVAILABLE:
        raise HTTPException(503, detail="Catalog storage is not provisioned")
    return sort_categories(categories)


@router.get("", response_model=List[CategoryOut])
def list_categories(gateway: CatalogGateway = Depends(get_gateway)):
    """
    Получить список всех категорий.

    Категории отсортированы по order; при равных значениях сохраняется
    исходный порядок.

    Returns:
        List[CategoryOut]: Список категорий

    Example:
        [
            {"id": "c1", "name": "Cervejas", "order": 1},
            {"id": "c2", "name": "Destilados", "order": 2}
        ]
    """
    return _load(gateway)


@router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: str, gateway: CatalogGateway = Depends(get_gateway)):
    """
    Получить категорию по ID.

    Raises:
        HTTPException: Если категория не найдена
    """
    for category in _load(gateway):
        if category.id == category_id:
            return category
    raise HTTPException(404, detail="Category not found")

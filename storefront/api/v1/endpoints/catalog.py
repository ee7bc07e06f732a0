"""
API endpoint витрины: страница каталога целиком.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from storefront.api.deps import get_gateway
from storefront.api.v1.presenters import catalog_page
from storefront.schemas.storefront import CatalogPage
from storefront.services.gateway import CatalogGateway

router = APIRouter()


@router.get("", response_model=CatalogPage)
def get_catalog(
    q: Optional[str] = Query(None, description="Поиск по названию товара"),
    category_id: Optional[str] = Query(None, description="Выбранная категория"),
    gateway: CatalogGateway = Depends(get_gateway),
):
    """
    Получить страницу каталога.

    Возвращает разделы (категории, в которых есть подходящие товары,
    по возрастанию order), список всех категорий для вкладок, номер
    WhatsApp и логотип. Если таблицы в БД не созданы, status равен
    configuration_required, а списки пусты.

    Args:
        q: Строка поиска (подстрока, регистр не важен)
        category_id: ID выбранной категории
        gateway: Шлюз каталога

    Returns:
        CatalogPage: Страница каталога
    """
    return catalog_page(gateway.fetch_snapshot(), q or "", category_id)

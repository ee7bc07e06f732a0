"""
Фильтрация каталога для витрины.

По полным спискам категорий и товаров, строке поиска и выбранной
категории вычисляет, какие разделы и товары показывать.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from storefront.schemas.catalog import CategoryOut, ProductOut


@dataclass(frozen=True)
class CatalogView:
    """
    Результат фильтрации.

    Attributes:
        categories_to_show: Разделы для отображения, по возрастанию order
        filtered_products: Товары, прошедшие поиск и фильтр категории
    """

    categories_to_show: List[CategoryOut] = field(default_factory=list)
    filtered_products: List[ProductOut] = field(default_factory=list)

    def products_for(self, category_id: str) -> List[ProductOut]:
        """Товары раздела в исходном порядке."""
        return [p for p in self.filtered_products if p.category_id == category_id]

    def sections(self) -> Dict[str, List[ProductOut]]:
        return {c.id: self.products_for(c.id) for c in self.categories_to_show}


def _matches_search(product: ProductOut, term: str) -> bool:
    return term in product.name.lower()


def sort_categories(categories: Sequence[CategoryOut]) -> List[CategoryOut]:
    """Стабильная сортировка по order; отсутствующий order считается 0."""
    return sorted(categories, key=lambda c: c.order or 0)


def filter_catalog(
    categories: Sequence[CategoryOut],
    products: Sequence[ProductOut],
    search_term: str = "",
    selected_category_id: Optional[str] = None,
) -> CatalogView:
    """
    Отфильтровать каталог.

    Товар виден, если его название содержит search_term (без учета
    регистра) и он относится к выбранной категории (если она задана).
    Категория видна, если она выбрана (или выбор не задан) и в ней
    есть хотя бы один товар, подходящий под поиск. Пустые разделы
    не показываются.

    Args:
        categories: Все категории
        products: Все товары
        search_term: Строка поиска (подстрока, регистр не важен)
        selected_category_id: ID выбранной категории или None

    Returns:
        CatalogView: Видимые разделы и товары
    """
    term = (search_term or "").lower()

    filtered_products = [
        p
        for p in products
        if _matches_search(p, term)
        and (not selected_category_id or p.category_id == selected_category_id)
    ]

    # Категории с подходящими товарами считаются по полному списку товаров
    matching_category_ids = {p.category_id for p in products if _matches_search(p, term)}

    categories_to_show = sort_categories(
        [
            c
            for c in categories
            if (not selected_category_id or c.id == selected_category_id)
            and c.id in matching_category_ids
        ]
    )

    return CatalogView(
        categories_to_show=categories_to_show,
        filtered_products=filtered_products,
    )

"""
Pydantic схемы витрины: страница каталога, корзина, оформление заказа.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from storefront.schemas.catalog import CategoryOut


class ProductCard(BaseModel):
    """Товар на витрине."""

    id: str
    name: str
    price: str
    price_label: str = Field(description="R$ 9,90 или Consulte")
    purchasable: bool
    category_id: Optional[str] = None
    description: Optional[str] = None


class CatalogSection(BaseModel):
    """Раздел витрины: категория и ее товары."""

    category: CategoryOut
    products: List[ProductCard]


class CatalogPage(BaseModel):
    """
    Страница каталога.

    status = configuration_required, если таблицы в БД не созданы:
    витрина показывает не "пустой каталог", а "магазин настраивается".
    """

    status: str = Field(description="ready/configuration_required")
    whatsapp_number: str
    logo_url: str
    search_term: str = ""
    selected_category_id: Optional[str] = None
    categories: List[CategoryOut]
    sections: List[CatalogSection]


class CartLineOut(BaseModel):
    product_id: str
    name: str
    price: str
    price_label: str
    quantity: int
    line_total: float


class CartOut(BaseModel):
    """Корзина с итогом."""

    lines: List[CartLineOut]
    items_count: int
    total: float
    total_label: str


class CartAddRequest(BaseModel):
    product_id: str


class CartAddResponse(CartOut):
    added: bool = Field(description="False, если у товара нет валидной цены")


class QuantityUpdate(BaseModel):
    delta: int = Field(..., description="Изменение количества, например +1 или -1")


class FiltersUpdate(BaseModel):
    search_term: str = ""
    selected_category_id: Optional[str] = None


class CustomerUpdate(BaseModel):
    customer_name: str = ""


class CheckoutRequest(BaseModel):
    customer_name: Optional[str] = None


class CheckoutOut(BaseModel):
    """Ссылка на WhatsApp с готовым текстом заказа."""

    url: str
    message: str
    total: float
    total_label: str


class StorefrontSessionOut(BaseModel):
    session_id: str
    customer_name: str
    catalog: CatalogPage
    cart: CartOut

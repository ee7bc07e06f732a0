"""
Pydantic схемы каталога: записи категорий, товаров и настроек.

Записи из БД проходят валидацию здесь, на границе шлюза данных,
и дальше по коду передаются только как типизированные объекты.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CategoryOut(BaseModel):
    """Категория каталога."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    name: str
    order: Optional[int] = 0

    @field_validator("order", mode="before")
    @classmethod
    def _order_default(cls, value):
        return 0 if value is None else value


class ProductOut(BaseModel):
    """Товар каталога. Цена хранится в исходном текстовом виде."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    name: str
    price: str = ""
    category_id: Optional[str] = None
    description: Optional[str] = None

    @field_validator("price", mode="before")
    @classmethod
    def _price_as_text(cls, value):
        return "" if value is None else str(value)


class CategoryIn(BaseModel):
    """Создание или изменение категории."""

    name: str = Field(..., description="Название категории")
    order: int = Field(0, description="Порядок отображения")

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name must not be blank")
        return value


class CategoryUpdate(BaseModel):
    """Частичное обновление категории."""

    name: Optional[str] = None
    order: Optional[int] = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Name must not be blank")
        return value


class ProductIn(BaseModel):
    """Создание товара."""

    name: str = Field(..., description="Название товара")
    price: str = Field("", description="Цена как текст, например 9,90")
    category_id: Optional[str] = Field(
        None, description="ID категории (по умолчанию первая категория)"
    )
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name must not be blank")
        return value

    @field_validator("price", mode="before")
    @classmethod
    def _price_as_text(cls, value):
        return "" if value is None else str(value).strip()


class ProductUpdate(BaseModel):
    """Частичное обновление товара."""

    name: Optional[str] = None
    price: Optional[str] = None
    category_id: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Name must not be blank")
        return value

    @field_validator("price", mode="before")
    @classmethod
    def _price_as_text(cls, value):
        return None if value is None else str(value).strip()


class ProductImportRequest(BaseModel):
    """Массовый импорт товаров."""

    items: List[dict] = Field(..., min_length=1, description="Товары для импорта")


class ImportFailure(BaseModel):
    """Ошибка импорта одной позиции."""

    index: int
    detail: str


class ProductImportResult(BaseModel):
    """Итог массового импорта."""

    created: int
    failed: int
    errors: List[ImportFailure] = []


class SettingUpdate(BaseModel):
    value: Optional[str] = None


class StoreSettingsOut(BaseModel):
    """Настройки витрины с учетом значений по умолчанию."""

    whatsapp_number: str
    logo_url: str

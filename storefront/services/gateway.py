"""
Шлюз данных каталога.

Единая точка чтения и изменения категорий, товаров и настроек.
Чтение возвращает типизированные записи или маркер UNAVAILABLE,
если таблицы в БД еще не созданы.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Union

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from storefront.core.config import settings
from storefront.db.models import Category, Product, Setting
from storefront.schemas.catalog import CategoryOut, ProductOut
from storefront.services.notifications import ChangeNotifier, Subscription

logger = logging.getLogger(__name__)

WHATSAPP_NUMBER_KEY = "whatsapp_number"
LOGO_URL_KEY = "logo_url"


class _Unavailable:
    """Маркер: схема БД не создана, каталог настраивается."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNAVAILABLE"


UNAVAILABLE = _Unavailable()


class GatewayError(Exception):
    """Ошибка БД при изменении данных. Состояние не изменено."""


class RecordNotFound(LookupError):
    """Запись с указанным ID не найдена."""


class InvalidReference(ValueError):
    """Ссылка на несуществующую запись (например, категорию)."""


def is_missing_table(exc: DBAPIError) -> bool:
    """Ошибка вызвана отсутствием таблицы (PostgreSQL 42P01, SQLite)."""
    orig = getattr(exc, "orig", None)
    if getattr(orig, "pgcode", None) == "42P01":
        return True
    message = str(orig or exc).lower()
    return "no such table" in message or (
        "relation" in message and "does not exist" in message
    )


def _defaults() -> Dict[str, str]:
    return {
        WHATSAPP_NUMBER_KEY: settings.DEFAULT_WHATSAPP_NUMBER,
        LOGO_URL_KEY: settings.DEFAULT_LOGO_URL,
    }


def setting_or_default(key: str, value: Optional[str]) -> str:
    """Значение настройки или значение по умолчанию, если оно пустое."""
    return value or _defaults().get(key, "")


@dataclass(frozen=True)
class CatalogSnapshot:
    """
    Полный снимок каталога. Новый снимок целиком заменяет старый.

    Attributes:
        categories: Категории по возрастанию order
        products: Товары по названию
        whatsapp_number: Номер для передачи заказа
        logo_url: Адрес логотипа
        available: False, если схема БД не создана
    """

    categories: List[CategoryOut] = field(default_factory=list)
    products: List[ProductOut] = field(default_factory=list)
    whatsapp_number: str = ""
    logo_url: str = ""
    available: bool = True

    @classmethod
    def unavailable(cls) -> "CatalogSnapshot":
        return cls(
            whatsapp_number=settings.DEFAULT_WHATSAPP_NUMBER,
            logo_url=settings.DEFAULT_LOGO_URL,
            available=False,
        )

    def product(self, product_id: str) -> Optional[ProductOut]:
        for product in self.products:
            if product.id == product_id:
                return product
        return None


class CatalogGateway:
    """
    Чтение каталога и подписка на изменения.

    Каждое чтение открывает короткую сессию из session_factory.
    Без переданного notifier шлюз создает свой и подключает его к
    session_factory; close() отключает его.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        notifier: Optional[ChangeNotifier] = None,
    ):
        self.session_factory = session_factory
        if notifier is None:
            notifier = ChangeNotifier()
            notifier.attach(session_factory)
        self.notifier = notifier

    def close(self) -> None:
        self.notifier.detach()

    def _read(self, what: str, query: Callable[[Session], object], empty):
        try:
            with self.session_factory() as db:
                return query(db)
        except DBAPIError as e:
            if is_missing_table(e):
                logger.warning(f"Catalog storage is not provisioned ({what}): {e.orig}")
                return UNAVAILABLE
            logger.error(f"Failed to fetch {what}: {e}")
            return empty
        except (SQLAlchemyError, ValidationError) as e:
            logger.error(f"Failed to fetch {what}: {e}")
            return empty

    def fetch_categories(self) -> Union[List[CategoryOut], _Unavailable]:
        return self._read(
            "categories",
            lambda db: [
                CategoryOut.model_validate(c)
                for c in db.scalars(select(Category).order_by(Category.order))
            ],
            [],
        )

    def fetch_products(self) -> Union[List[ProductOut], _Unavailable]:
        return self._read(
            "products",
            lambda db: [
                ProductOut.model_validate(p)
                for p in db.scalars(select(Product).order_by(Product.name))
            ],
            [],
        )

    def fetch_setting(self, key: str) -> Union[Optional[str], _Unavailable]:
        return self._read(
            f"setting {key}",
            lambda db: db.scalar(select(Setting.value).where(Setting.key == key)),
            None,
        )

    def fetch_snapshot(self) -> CatalogSnapshot:
        """
        Загрузить категории, товары и настройки одним снимком.

        Если хотя бы один источник вернул UNAVAILABLE, весь каталог
        считается пустым и ожидающим настройки.
        """
        categories = self.fetch_categories()
        products = self.fetch_products()
        whatsapp = self.fetch_setting(WHATSAPP_NUMBER_KEY)
        logo = self.fetch_setting(LOGO_URL_KEY)

        if any(v is UNAVAILABLE for v in (categories, products, whatsapp, logo)):
            return CatalogSnapshot.unavailable()

        return CatalogSnapshot(
            categories=categories,
            products=products,
            whatsapp_number=setting_or_default(WHATSAPP_NUMBER_KEY, whatsapp),
            logo_url=setting_or_default(LOGO_URL_KEY, logo),
        )

    def subscribe_to_changes(self, callback: Callable[[], None]) -> Subscription:
        return self.notifier.subscribe(callback)


# ==================== ИЗМЕНЕНИЕ ДАННЫХ ====================


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to {action}: {e}")
        raise GatewayError(f"Failed to {action}") from e


def upsert_category(
    db: Session, data: dict, category_id: Optional[str] = None
) -> CategoryOut:
    """
    Создать категорию или обновить существующую.

    Args:
        db: Сессия базы данных
        data: Поля категории (name, order)
        category_id: ID для обновления, None для создания

    Raises:
        RecordNotFound: Категория с category_id не найдена
        GatewayError: Ошибка БД
    """
    if category_id is None:
        category = Category(name=data["name"], order=data.get("order") or 0)
        db.add(category)
    else:
        category = db.get(Category, category_id)
        if category is None:
            raise RecordNotFound(f"Category {category_id} not found")
        for key in ("name", "order"):
            if data.get(key) is not None:
                setattr(category, key, data[key])

    _commit(db, "save category")
    db.refresh(category)
    logger.info(f"Category saved: {category.id}")
    return CategoryOut.model_validate(category)


def delete_category(db: Session, category_id: str) -> None:
    """Удалить категорию вместе со всеми ее товарами."""
    category = db.get(Category, category_id)
    if category is None:
        raise RecordNotFound(f"Category {category_id} not found")
    db.delete(category)
    _commit(db, "delete category")
    logger.info(f"Category deleted with its products: {category_id}")


def first_category_id(db: Session) -> Optional[str]:
    return db.scalar(select(Category.id).order_by(Category.order).limit(1))


def upsert_product(
    db: Session, data: dict, product_id: Optional[str] = None
) -> ProductOut:
    """
    Создать товар или обновить существующий.

    Если category_id не указан при создании, товар попадает в первую
    по порядку категорию.

    Raises:
        RecordNotFound: Товар с product_id не найден
        InvalidReference: Категория не существует или категорий нет
        GatewayError: Ошибка БД
    """
    category_id = data.get("category_id")
    if product_id is None and not category_id:
        category_id = first_category_id(db)
        if category_id is None:
            raise InvalidReference("Create a category first")
    if category_id and db.get(Category, category_id) is None:
        raise InvalidReference(f"Category {category_id} not found")

    if product_id is None:
        product = Product(
            name=data["name"],
            price=data.get("price") or "",
            category_id=category_id,
            description=data.get("description"),
        )
        db.add(product)
    else:
        product = db.get(Product, product_id)
        if product is None:
            raise RecordNotFound(f"Product {product_id} not found")
        for key in ("name", "price", "description"):
            if data.get(key) is not None:
                setattr(product, key, data[key])
        if category_id:
            product.category_id = category_id

    _commit(db, "save product")
    db.refresh(product)
    logger.info(f"Product saved: {product.id}")
    return ProductOut.model_validate(product)


def delete_product(db: Session, product_id: str) -> None:
    product = db.get(Product, product_id)
    if product is None:
        raise RecordNotFound(f"Product {product_id} not found")
    db.delete(product)
    _commit(db, "delete product")
    logger.info(f"Product deleted: {product_id}")


def get_setting(db: Session, key: str) -> str:
    """Значение настройки с учетом значения по умолчанию."""
    value = db.scalar(select(Setting.value).where(Setting.key == key))
    return setting_or_default(key, value)


def update_setting(db: Session, key: str, value: Optional[str]) -> None:
    """Сохранить настройку (insert или update по ключу)."""
    setting = db.get(Setting, key)
    if setting is None:
        db.add(Setting(key=key, value=value))
    else:
        setting.value = value
    _commit(db, f"save setting {key}")
    logger.info(f"Setting updated: {key}")

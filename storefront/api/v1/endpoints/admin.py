"""
API эндпоинты для административной панели.

Управление категориями, товарами и настройками витрины.
Все изменения идут через шлюз данных; при ошибке БД состояние
не меняется, и администратор повторяет действие сам.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.schema import CreateTable

from storefront.core.auth import auth_service, get_current_active_user, require_admin
from storefront.core.config import settings
from storefront.db.database import get_db
from storefront.db.models import Category, Product, Setting
from storefront.db.models.user import User
from storefront.schemas.admin import (
    AdminCategoryOut,
    AdminProductOut,
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    UserOut,
)
from storefront.schemas.catalog import (
    CategoryIn,
    CategoryOut,
    CategoryUpdate,
    ImportFailure,
    ProductImportRequest,
    ProductImportResult,
    ProductIn,
    ProductOut,
    ProductUpdate,
    SettingUpdate,
    StoreSettingsOut,
)
from storefront.services import gateway
from storefront.services.gateway import (
    LOGO_URL_KEY,
    WHATSAPP_NUMBER_KEY,
    GatewayError,
    InvalidReference,
    RecordNotFound,
)
from storefront.services.pricing import format_price, is_valid_price

logger = logging.getLogger(__name__)

router = APIRouter()

# Минимальная длина номера WhatsApp: код региона + номер
MIN_WHATSAPP_DIGITS = 10

EDITABLE_SETTINGS = (WHATSAPP_NUMBER_KEY, LOGO_URL_KEY)


@contextmanager
def _gateway_errors(db: Session):
    """Перевести ошибки шлюза данных в HTTP ответы."""
    try:
        yield
    except RecordNotFound as e:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidReference as e:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(e))
    except GatewayError as e:
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Admin database operation failed: {e}")
        raise HTTPException(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database error, check that the schema is provisioned",
        )


# ==================== АУТЕНТИФИКАЦИЯ ====================


@router.post("/auth/login", response_model=LoginResponse)
def admin_login(login_data: LoginRequest, db: Session = Depends(get_db)):
    """
    Вход в административную панель.

    Логин может быть username или email; логин без "@" дополнительно
    проверяется как <login>@ADMIN_EMAIL_DOMAIN.

    Args:
        login_data: Данные для входа (username, password)
        db: Сессия базы данных

    Returns:
        JWT токен и информация о пользователе

    Raises:
        HTTPException: При неверных учетных данных или отсутствии прав
    """
    user = auth_service.find_user(db, login_data.username)

    if not user or not auth_service.verify_password(
        login_data.password, user.hashed_password
    ):
        logger.info(f"Failed admin login for {login_data.username!r}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="User account is disabled"
        )

    if not user.is_admin and not user.is_super_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Admin privileges required.",
        )

    user.last_login = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)

    access_token = auth_service.create_access_token(data={"sub": str(user.id)})
    logger.info(f"Admin logged in: {user.username}")

    return LoginResponse(
        access_token=access_token,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserOut.model_validate(user),
    )


@router.post("/auth/change-password")
def change_password(
    password_data: ChangePasswordRequest,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """
    Смена пароля текущего пользователя.

    Returns:
        Сообщение об успешной смене пароля
    """
    if not auth_service.verify_password(
        password_data.current_password, current_user.hashed_password
    ):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect",
        )

    current_user.hashed_password = auth_service.get_password_hash(
        password_data.new_password
    )
    db.commit()

    return {"message": "Password changed successfully"}


@router.get("/users/profile", response_model=UserOut)
def get_current_user_profile(current_user: User = Depends(get_current_active_user)):
    """Получить профиль текущего пользователя."""
    return current_user


# ==================== УПРАВЛЕНИЕ КАТЕГОРИЯМИ ====================


@router.get("/categories", response_model=List[AdminCategoryOut])
def admin_list_categories(
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Получить список категорий с количеством товаров.
    """
    stmt = (
        select(
            Category.id,
            Category.name,
            Category.order,
            func.count(Product.id).label("products_count"),
        )
        .outerjoin(Product, Product.category_id == Category.id)
        .group_by(Category.id, Category.name, Category.order)
        .order_by(Category.order)
    )

    with _gateway_errors(db):
        rows = db.execute(stmt).all()

    return [
        AdminCategoryOut(
            id=row.id,
            name=row.name,
            order=row.order or 0,
            products_count=row.products_count or 0,
        )
        for row in rows
    ]


@router.post("/categories", response_model=CategoryOut, status_code=201)
def admin_create_category(
    category_data: CategoryIn,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Создать новую категорию."""
    with _gateway_errors(db):
        return gateway.upsert_category(db, category_data.model_dump())


@router.put("/categories/{category_id}", response_model=CategoryOut)
def admin_update_category(
    category_id: str,
    category_data: CategoryUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Обновить название или порядок категории."""
    with _gateway_errors(db):
        return gateway.upsert_category(
            db, category_data.model_dump(exclude_unset=True), category_id
        )


@router.delete("/categories/{category_id}")
def admin_delete_category(
    category_id: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Удалить категорию.

    Все товары категории удаляются вместе с ней.
    """
    with _gateway_errors(db):
        gateway.delete_category(db, category_id)
    return {"message": "Category deleted successfully"}


# ==================== УПРАВЛЕНИЕ ПРОДУКТАМИ ====================


def _admin_product(product: Product) -> AdminProductOut:
    return AdminProductOut(
        id=product.id,
        name=product.name,
        price=product.price or "",
        price_label=format_price(product.price),
        purchasable=is_valid_price(product.price),
        category_id=product.category_id,
        category_name=product.category.name if product.category else None,
        description=product.description,
    )


@router.get("/products", response_model=List[AdminProductOut])
def admin_list_products(
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Получить список всех товаров для админки, по названию.
    """
    with _gateway_errors(db):
        products = db.scalars(select(Product).order_by(Product.name)).all()
        return [_admin_product(p) for p in products]


@router.post("/products", response_model=ProductOut, status_code=201)
def admin_create_product(
    product_data: ProductIn,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Создать новый товар.

    Если category_id не указан, товар попадает в первую категорию.
    """
    with _gateway_errors(db):
        return gateway.upsert_product(db, product_data.model_dump())


@router.post("/products/import", response_model=ProductImportResult)
def admin_import_products(
    import_data: ProductImportRequest,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Массовый импорт товаров.

    Позиции сохраняются по одной; ошибка в одной позиции не отменяет
    уже сохраненные. В ответе - итог по успешным и неудачным.
    """
    created = 0
    errors: List[ImportFailure] = []

    for index, raw in enumerate(import_data.items):
        try:
            item = ProductIn.model_validate(raw)
            gateway.upsert_product(db, item.model_dump())
            created += 1
        except ValidationError as e:
            errors.append(ImportFailure(index=index, detail=e.errors()[0]["msg"]))
        except (InvalidReference, GatewayError) as e:
            errors.append(ImportFailure(index=index, detail=str(e)))
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Product import failed at item {index}: {e}")
            errors.append(ImportFailure(index=index, detail="Database error"))

    logger.info(f"Product import finished: {created} created, {len(errors)} failed")
    return ProductImportResult(created=created, failed=len(errors), errors=errors)


@router.get("/products/{product_id}", response_model=AdminProductOut)
def admin_get_product(
    product_id: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Получить детали товара."""
    with _gateway_errors(db):
        product = db.get(Product, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Product not found"
            )
        return _admin_product(product)


@router.put("/products/{product_id}", response_model=ProductOut)
def admin_update_product(
    product_id: str,
    product_data: ProductUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Обновить товар. Передаются только изменяемые поля."""
    with _gateway_errors(db):
        return gateway.upsert_product(
            db, product_data.model_dump(exclude_unset=True), product_id
        )


@router.delete("/products/{product_id}")
def admin_delete_product(
    product_id: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Удалить товар."""
    with _gateway_errors(db):
        gateway.delete_product(db, product_id)
    return {"message": "Product deleted successfully"}


# ==================== НАСТРОЙКИ ВИТРИНЫ ====================


@router.get("/settings", response_model=StoreSettingsOut)
def get_store_settings(
    current_user: User = Depends(require_admin), db: Session = Depends(get_db)
):
    """
    Получить настройки витрины.

    Незаданные значения заменяются значениями по умолчанию.
    """
    with _gateway_errors(db):
        return StoreSettingsOut(
            whatsapp_number=gateway.get_setting(db, WHATSAPP_NUMBER_KEY),
            logo_url=gateway.get_setting(db, LOGO_URL_KEY),
        )


@router.put("/settings/{key}", response_model=StoreSettingsOut)
def update_store_setting(
    key: str,
    setting_data: SettingUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Обновить настройку витрины.

    Номер WhatsApp очищается от всего, кроме цифр, и должен содержать
    не меньше 10 цифр (код региона + номер).

    Args:
        key: whatsapp_number или logo_url
        setting_data: Новое значение

    Raises:
        HTTPException: Неизвестный ключ или невалидный номер
    """
    if key not in EDITABLE_SETTINGS:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Unknown setting")

    value = setting_data.value
    if key == WHATSAPP_NUMBER_KEY:
        value = "".join(ch for ch in (value or "") if ch.isdigit())
        if not value:
            raise HTTPException(
                status.HTTP_400_BAD_REQUEST, detail="WhatsApp number is required"
            )
        if len(value) < MIN_WHATSAPP_DIGITS:
            raise HTTPException(
                status.HTTP_400_BAD_REQUEST,
                detail="Invalid number, include the area code",
            )

    with _gateway_errors(db):
        gateway.update_setting(db, key, value)
        return StoreSettingsOut(
            whatsapp_number=gateway.get_setting(db, WHATSAPP_NUMBER_KEY),
            logo_url=gateway.get_setting(db, LOGO_URL_KEY),
        )


# ==================== СХЕМА БД ====================


@router.get("/schema", response_class=PlainTextResponse)
def get_schema_script(current_user: User = Depends(require_admin)):
    """
    SQL скрипт создания таблиц каталога (PostgreSQL).

    Показывается администратору, когда витрина сообщает
    configuration_required.
    """
    dialect = postgresql.dialect()
    statements = [
        str(CreateTable(model.__table__, if_not_exists=True).compile(dialect=dialect)).strip()
        + ";"
        for model in (Setting, Category, Product)
    ]
    return "\n\n".join(statements) + "\n"

"""
Pydantic схемы для административной панели.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# ==================== ПОЛЬЗОВАТЕЛИ ====================


class UserOut(BaseModel):
    """Схема для вывода пользователя."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    username: str
    full_name: Optional[str] = None
    is_active: bool
    is_admin: bool
    is_super_admin: bool
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None


# ==================== АУТЕНТИФИКАЦИЯ ====================


class LoginRequest(BaseModel):
    """Схема для входа в систему."""

    username: str = Field(..., description="Username или email")
    password: str = Field(..., description="Пароль")


class LoginResponse(BaseModel):
    """Схема ответа при входе в систему."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserOut


class ChangePasswordRequest(BaseModel):
    """Схема для смены пароля."""

    current_password: str = Field(..., description="Текущий пароль")
    new_password: str = Field(..., min_length=6, description="Новый пароль")


# ==================== КАТАЛОГ ====================


class AdminCategoryOut(BaseModel):
    """Категория с количеством товаров."""

    id: str
    name: str
    order: int
    products_count: int


class AdminProductOut(BaseModel):
    """Товар для таблицы в админке."""

    id: str
    name: str
    price: str
    price_label: str
    purchasable: bool
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    description: Optional[str] = None

"""
Модуль аутентификации и авторизации администратора.

Содержит функции для работы с JWT токенами, хеширования паролей
и проверки прав доступа к панели управления.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.db.database import get_db
from storefront.db.models.user import User

# Настройка хеширования паролей
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ALGORITHM = "HS256"

# HTTP Bearer схема
security = HTTPBearer()


class AuthService:
    """Сервис для работы с аутентификацией."""

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Проверка пароля."""
        return pwd_context.verify(plain_password, hashed_password)

    @staticmethod
    def get_password_hash(password: str) -> str:
        """Хеширование пароля."""
        return pwd_context.hash(password)

    @staticmethod
    def create_access_token(
        data: dict, expires_delta: Optional[timedelta] = None
    ) -> str:
        """Создание JWT токена."""
        to_encode = data.copy()
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        )
        to_encode.update({"exp": expire})
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)

    @staticmethod
    def verify_token(token: str) -> Optional[dict]:
        """Проверка JWT токена."""
        try:
            return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
        except jwt.PyJWTError:
            return None

    @staticmethod
    def find_user(db: Session, login: str) -> Optional[User]:
        """
        Найти пользователя по логину.

        Логин может быть username или email. Если аккаунт с таким
        username не найден и в логине нет "@", пробуем адрес
        вида login@ADMIN_EMAIL_DOMAIN.
        """
        login = (login or "").strip()
        user = db.scalar(
            select(User).where(or_(User.username == login, User.email == login))
        )
        if user is None and login and "@" not in login:
            email = f"{login.lower()}@{settings.ADMIN_EMAIL_DOMAIN}"
            user = db.scalar(select(User).where(User.email == email))
        return user


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Получение текущего пользователя из токена."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = AuthService.verify_token(credentials.credentials)
    if payload is None:
        raise credentials_exception

    user_id: Optional[str] = payload.get("sub")
    if user_id is None:
        raise credentials_exception

    user = db.get(User, user_id)
    if user is None:
        raise credentials_exception

    return user


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Получение активного пользователя."""
    if not current_user.is_active:
        raise HTTPException(status_code=400, detail="Inactive user")
    return current_user


def require_admin(current_user: User = Depends(get_current_active_user)) -> User:
    """Проверка прав администратора."""
    if not current_user.can_manage_catalog:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Not enough permissions"
        )
    return current_user


# Экспорт сервиса
auth_service = AuthService()

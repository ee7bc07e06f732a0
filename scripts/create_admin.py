#!/usr/bin/env python3
"""
Скрипт для создания администратора витрины.

Использование:
    python scripts/create_admin.py [username] [password]

Email администратора: <username>@ADMIN_EMAIL_DOMAIN, поэтому войти
можно как по логину, так и по email.
"""

import sys
from pathlib import Path

# Добавляем путь к модулю storefront
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import or_, select

from storefront.core.auth import AuthService
from storefront.core.config import settings
from storefront.db.database import SessionLocal
from storefront.db.models.user import User

DEFAULT_USERNAME = "admin"
DEFAULT_PASSWORD = "admin123"


def create_admin(username: str = DEFAULT_USERNAME, password: str = DEFAULT_PASSWORD) -> bool:
    """Создает администратора или сбрасывает пароль существующему."""
    print("🔑 Создание администратора...")
    print("=" * 50)

    email = f"{username.lower()}@{settings.ADMIN_EMAIL_DOMAIN}"

    try:
        with SessionLocal() as db:
            admin = db.scalar(
                select(User).where(or_(User.username == username, User.email == email))
            )

            if admin:
                print("✅ Администратор уже существует, обновляем пароль")
                admin.hashed_password = AuthService.get_password_hash(password)
                admin.is_active = True
                admin.is_admin = True
            else:
                print("📝 Создаем нового администратора...")
                admin = User(
                    username=username,
                    email=email,
                    hashed_password=AuthService.get_password_hash(password),
                    full_name="Administrador",
                    is_active=True,
                    is_admin=True,
                    is_super_admin=True,
                )
                db.add(admin)

            db.commit()
            db.refresh(admin)

            print(f"   Username: {admin.username}")
            print(f"   Email: {admin.email}")
            print(f"   ID: {admin.id}")

        print("=" * 50)
        print("🎉 Администратор готов к использованию!")
        print("📝 Смените пароль после первого входа!")
        return True

    except Exception as e:
        print(f"❌ Ошибка при создании администратора: {e}")
        return False


if __name__ == "__main__":
    args = sys.argv[1:]
    if not create_admin(*args[:2]):
        sys.exit(1)

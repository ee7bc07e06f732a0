"""
Конфигурация базы данных.

Содержит настройки подключения и фабрику сессий.
"""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from storefront.core.config import settings

# SQLite используется в тестах, соединение делится между потоками
connect_args = (
    {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
)

# Создание движка SQLAlchemy
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Проверка соединения перед использованием
    echo=bool(settings.DEBUG),  # Логирование SQL запросов в режиме отладки
    connect_args=connect_args,
)


# Фабрика сессий базы данных
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db() -> Generator:
    """
    Dependency для получения сессии базы данных.

    Yields:
        Session: Сессия SQLAlchemy

    Note:
        Автоматически закрывает сессию после использования
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

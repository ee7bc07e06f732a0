"""
Базовый класс для всех моделей SQLAlchemy.

Использует Declarative API SQLAlchemy 2.0.
"""

import uuid

from sqlalchemy.orm import DeclarativeBase


def new_id() -> str:
    """Сгенерировать строковый UUID для первичного ключа."""
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """
    Базовый класс для всех моделей.

    Идентификаторы хранятся как текстовые UUID, чтобы схема одинаково
    работала в PostgreSQL и SQLite.
    """

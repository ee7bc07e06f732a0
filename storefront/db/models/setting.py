"""
Модель настройки витрины (ключ-значение).
"""

from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class Setting(Base):
    """
    Настройка витрины: номер WhatsApp, адрес логотипа.

    Attributes:
        key: Ключ настройки
        value: Значение (может отсутствовать)
    """

    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Setting(key='{self.key}')>"

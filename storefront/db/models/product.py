"""
Модель товара.
"""

from typing import Optional

from sqlalchemy import ForeignKey, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, new_id


class Product(Base):
    """
    Модель товара.

    Attributes:
        id: Уникальный идентификатор товара
        category_id: ID категории товара (может отсутствовать у старых записей)
        name: Название товара
        price: Цена в том виде, как ее ввел администратор ("9,90", "", ...)
        description: Описание товара
        category: Связь с категорией
    """

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    category_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[str] = mapped_column(
        Text, nullable=False, default="", server_default=text("''")
    )
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    category: Mapped[Optional["Category"]] = relationship(back_populates="products")

    def __repr__(self) -> str:
        return f"<Product(id='{self.id}', name='{self.name}')>"

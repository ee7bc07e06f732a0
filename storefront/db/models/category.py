"""
Модель категории товаров.
"""

from typing import List

from sqlalchemy import Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, new_id


class Category(Base):
    """
    Модель категории товаров.

    Attributes:
        id: Уникальный идентификатор категории
        name: Название категории
        order: Порядок отображения на витрине (может повторяться)
        products: Связь с товарами в этой категории
    """

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    order: Mapped[int] = mapped_column(
        "order", Integer, default=0, server_default=text("0")
    )

    # Связь с товарами (каскадное удаление)
    products: Mapped[List["Product"]] = relationship(
        back_populates="category",
        cascade="all,delete",
    )

    def __repr__(self) -> str:
        return f"<Category(id='{self.id}', name='{self.name}', order={self.order})>"

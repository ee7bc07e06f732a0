"""
Корзина покупателя.

Корзина живет только в памяти в рамках одной сессии витрины:
не сохраняется в БД и не синхронизируется с каталогом.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from storefront.schemas.catalog import ProductOut
from storefront.services.pricing import is_valid_price, price_or_zero


@dataclass
class CartLine:
    """
    Позиция корзины.

    Attributes:
        product: Снимок товара на момент первого добавления
        quantity: Количество, всегда больше нуля
    """

    product: ProductOut
    quantity: int = 1

    @property
    def product_id(self) -> str:
        return self.product.id

    @property
    def unit_price(self) -> float:
        return price_or_zero(self.product.price)

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity


class Cart:
    """
    Упорядоченный набор позиций, по одной на каждый товар.

    Порядок позиций - порядок первого добавления.
    """

    def __init__(self):
        # dict сохраняет порядок вставки
        self._lines: Dict[str, CartLine] = {}

    def __iter__(self) -> Iterator[CartLine]:
        return iter(list(self._lines.values()))

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, product_id: str) -> bool:
        return product_id in self._lines

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def get(self, product_id: str) -> Optional[CartLine]:
        return self._lines.get(product_id)

    def add(self, product: ProductOut) -> bool:
        """
        Добавить товар в корзину.

        Товар без валидной цены не добавляется (без ошибки).
        Повторное добавление увеличивает количество на 1, не меняя
        позицию строки.

        Args:
            product: Товар из каталога

        Returns:
            bool: True, если корзина изменилась
        """
        if not is_valid_price(product.price):
            return False

        line = self._lines.get(product.id)
        if line is not None:
            line.quantity += 1
        else:
            self._lines[product.id] = CartLine(product=product, quantity=1)
        return True

    def update_quantity(self, product_id: str, delta: int) -> bool:
        """
        Изменить количество товара на delta.

        Позиция, количество которой стало 0, удаляется из корзины.

        Returns:
            bool: False, если товара нет в корзине
        """
        line = self._lines.get(product_id)
        if line is None:
            return False

        new_quantity = max(0, line.quantity + delta)
        if new_quantity == 0:
            del self._lines[product_id]
        else:
            line.quantity = new_quantity
        return True

    def remove(self, product_id: str) -> bool:
        return self._lines.pop(product_id, None) is not None

    def total(self) -> float:
        """Сумма корзины. Позиции с нераспознанной ценой дают 0."""
        return sum((line.line_total for line in self._lines.values()), 0.0)

    def clear(self) -> None:
        self._lines.clear()

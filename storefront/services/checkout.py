"""
Оформление заказа через WhatsApp.

Заказ не проводится в системе: из корзины и имени покупателя
собирается текст сообщения и ссылка на мессенджер с этим текстом.
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

from storefront.core.config import settings
from storefront.services.cart import Cart
from storefront.services.pricing import format_amount, format_price

# Символы, которые encodeURIComponent оставляет без кодирования
_URI_COMPONENT_SAFE = "-_.!~*'()"


class CheckoutError(ValueError):
    """Заказ не может быть оформлен."""


class BlankCustomerNameError(CheckoutError):
    def __init__(self):
        super().__init__("Please provide your name")


class EmptyCartError(CheckoutError):
    def __init__(self):
        super().__init__("Cart is empty")


@dataclass(frozen=True)
class CheckoutHandoff:
    """
    Данные для передачи заказа в мессенджер.

    Attributes:
        message: Текст сообщения
        url: Ссылка на мессенджер с номером магазина и текстом
        total: Сумма заказа
    """

    message: str
    url: str
    total: float

    @property
    def total_label(self) -> str:
        return format_amount(self.total)


def compose_message(
    cart: Cart, customer_name: str, store_name: Optional[str] = None
) -> str:
    """
    Собрать текст заказа.

    Args:
        cart: Непустая корзина
        customer_name: Имя покупателя
        store_name: Название магазина в приветствии

    Returns:
        str: Текст сообщения

    Raises:
        BlankCustomerNameError: Имя пустое или из одних пробелов
        EmptyCartError: В корзине нет позиций
    """
    name = (customer_name or "").strip()
    if not name:
        raise BlankCustomerNameError()
    if cart.is_empty:
        raise EmptyCartError()

    store_name = store_name or settings.STORE_NAME
    items_text = "\n".join(
        f"• *{line.quantity}x* {line.product.name} ({format_price(line.product.price)})"
        for line in cart
    )
    return (
        f"Olá {store_name}! Gostaria de fazer um pedido:\n\n"
        f"👤 *Cliente:* {name}\n\n"
        f"🛒 *Itens:*\n{items_text}\n\n"
        f"💰 *Total:* {format_amount(cart.total())}"
    )


def build_handoff_url(phone: str, message: str, base_url: Optional[str] = None) -> str:
    """Ссылка вида <base>?phone=<номер>&text=<закодированный текст>."""
    base_url = base_url or settings.MESSAGING_BASE_URL
    return f"{base_url}?phone={phone}&text={quote(message, safe=_URI_COMPONENT_SAFE)}"


def compose_checkout(cart: Cart, customer_name: str, phone: str) -> CheckoutHandoff:
    """
    Подготовить передачу заказа. Корзину не изменяет.

    Raises:
        CheckoutError: Если имя пустое или корзина пуста
    """
    message = compose_message(cart, customer_name)
    return CheckoutHandoff(
        message=message,
        url=build_handoff_url(phone, message),
        total=cart.total(),
    )

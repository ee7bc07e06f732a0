"""
Разбор и форматирование цен товаров.

Цена хранится как текст, введенный администратором: может быть пустой,
с запятой в качестве десятичного разделителя или вовсе не числом.
"""

import math
import re
from typing import Any, Optional

from storefront.core.config import settings

# Числовой префикс строки: "10 reais" -> 10, "12abc" -> 12, "1_000" -> 1
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _normalize(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    # Только первая запятая считается десятичным разделителем
    return str(raw).strip().replace(",", ".", 1)


def parse_price(raw: Any) -> float:
    """
    Преобразовать текстовую цену в число.

    Читается числовой префикс строки, остаток игнорируется
    ("9,90 un" -> 9.9).

    Args:
        raw: Цена в исходном виде ("9,90", "10.5", "", None, ...)

    Returns:
        float: Значение цены или NaN, если строка не начинается с числа
    """
    normalized = _normalize(raw)
    if not normalized:
        return math.nan
    match = _LEADING_NUMBER.match(normalized)
    if match is None:
        return math.nan
    return float(match.group())


def is_valid_price(raw: Any) -> bool:
    """
    Проверить, можно ли продавать товар по этой цене.

    Цена валидна, если после нормализации это конечное число больше нуля.
    """
    value = parse_price(raw)
    return math.isfinite(value) and value > 0


def price_or_zero(raw: Any) -> float:
    """Цена для расчетов: нераспознанная цена дает 0."""
    return parse_price(raw) if is_valid_price(raw) else 0.0


def format_amount(amount: float, currency: Optional[str] = None) -> str:
    """Сумма с двумя знаками после запятой: "R$ 25,50"."""
    prefix = settings.CURRENCY_PREFIX if currency is None else currency
    return f"{prefix} " + f"{amount:.2f}".replace(".", ",")


def format_price(
    raw: Any, currency: Optional[str] = None, unavailable: Optional[str] = None
) -> str:
    """
    Отформатировать цену для витрины.

    Args:
        raw: Цена в исходном виде
        currency: Префикс валюты (по умолчанию из настроек)
        unavailable: Подпись для невалидной цены (по умолчанию из настроек)

    Returns:
        str: "R$ 9,90" для валидной цены, иначе "Consulte"
    """
    if not is_valid_price(raw):
        return settings.PRICE_UNAVAILABLE_LABEL if unavailable is None else unavailable
    return format_amount(parse_price(raw), currency)

"""Display formatting for currency, dates and absent values."""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from worksphere_admin.core.config import settings

PLACEHOLDER = "-"

_CENTS = Decimal("0.01")


def _group_digits(digits: str, grouping: str) -> str:
    if len(digits) <= 3:
        return digits

    if grouping == "indian":
        head, tail = digits[:-3], digits[-3:]
        groups: list[str] = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        return ",".join([*groups, tail])

    return f"{int(digits):,}"


def format_amount(amount: float | Decimal, grouping: str | None = None) -> str:
    """Group digits and keep at most two fraction digits, trimming zeros."""
    grouping = grouping or settings.CURRENCY_GROUPING
    value = Decimal(str(amount)).quantize(_CENTS, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, _, fraction = f"{abs(value):f}".partition(".")
    fraction = fraction.rstrip("0")
    grouped = _group_digits(whole, grouping)
    return f"{sign}{grouped}.{fraction}" if fraction else f"{sign}{grouped}"


def format_currency(amount: float | Decimal | None, symbol: str | None = None) -> str:
    symbol = settings.CURRENCY_SYMBOL if symbol is None else symbol
    if not amount:
        return f"{symbol}0"
    return f"{symbol}{format_amount(amount)}"


def format_date(value: date | None) -> str:
    if value is None:
        return PLACEHOLDER
    return f"{value.day} {value:%B} {value.year}"


def or_placeholder(value: str | None) -> str:
    return value if value else PLACEHOLDER


def round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_fixed(value: float, digits: int) -> str:
    """Fixed-point text with half-up rounding, e.g. ``format_fixed(12.25, 1) == "12.3"``."""
    exponent = Decimal(1).scaleb(-digits)
    return f"{Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP):f}"


def status_slug(status: str) -> str:
    return status.lower().replace(" ", "-")

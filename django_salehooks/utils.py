import re
from decimal import Decimal, InvalidOperation
from typing import Any

from django.http import HttpRequest

from django_salehooks.constants import (
    CURRENCY_SYMBOLS,
    LOCALE_FORMATS,
    MISSING_VALUE_LABEL,
)

CENT = Decimal("0.01")

PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")


def safe_decimal(value: Any, default: Decimal | None = None) -> Decimal | None:
    """
    Safely convert a value to Decimal.

    Args:
        value: Value to convert (int, float, str, Decimal, None)
        default: Default value if conversion fails or value is None

    Returns:
        Decimal value
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (ValueError, TypeError, ArithmeticError):
        return default


def format_currency(
    value: Any, currency: str = "BRL", locale: str = "pt_BR"
) -> str:
    """
    Format a monetary value with grouped thousands and two decimals.

    Examples:
        - 1234.5, BRL, pt_BR -> R$ 1.234,50
        - 1234.5, USD, en_US -> $1,234.50

    Returns:
        The formatted string, or a placeholder label when value is missing
    """
    if value is None:
        return MISSING_VALUE_LABEL

    try:
        amount = Decimal(str(value)).quantize(CENT)
    except (InvalidOperation, ValueError, TypeError):
        return MISSING_VALUE_LABEL

    fmt = LOCALE_FORMATS.get(locale, LOCALE_FORMATS["pt_BR"])
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), currency.upper())

    is_negative = amount < 0
    integer_str, decimal_str = f"{abs(amount):.2f}".split(".")

    # Group digits from the right
    groups = []
    while len(integer_str) > 3:
        groups.insert(0, integer_str[-3:])
        integer_str = integer_str[:-3]
    groups.insert(0, integer_str)

    formatted = fmt["thousands"].join(groups) + fmt["decimal"] + decimal_str
    result = fmt["pattern"].format(symbol=symbol, amount=formatted)
    return f"-{result}" if is_negative else result


def interpolate(template: str, variables: dict[str, str]) -> str:
    """
    Replace {name} placeholders. Unknown or empty variables are left verbatim.
    """

    def replace(match):
        return variables.get(match.group(1)) or match.group(0)

    return PLACEHOLDER_RE.sub(replace, template)


def headers_to_dict(request: HttpRequest) -> dict[str, str]:
    """Convert request headers to a plain dict for logging."""
    return {key.lower(): value for key, value in request.headers.items()}


def first_present(*values):
    """Return the first value that is neither None nor an empty string."""
    for value in values:
        if value is not None and value != "":
            return value
    return None


def truncate(value: str | None, max_length: int | None) -> str | None:
    """Cut value down to max_length characters, leaving None untouched."""
    if value is None or not max_length or len(value) <= max_length:
        return value
    return value[:max_length]

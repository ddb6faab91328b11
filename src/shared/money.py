"""Currency helpers.

Amounts are whole major-currency units (Naira by default). The payment
processor expects minor units (kobo, cents), hence ``to_minor_units``.
"""

DEFAULT_CURRENCY = "NGN"

_SYMBOLS = {
    "NGN": "₦",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}


def to_minor_units(amount: int | float) -> int:
    """Convert a major-unit amount to the processor's minor units (x100)."""
    return int(round(amount * 100))


def format_currency(amount: int | float, currency: str = DEFAULT_CURRENCY) -> str:
    """Render ``amount`` for display.

    Naira is shown without decimals (``₦65,000``). Every other currency falls
    back to a two-decimal rendering with its symbol, or its ISO code when no
    symbol is known (``$1,234.50``, ``ZAR 10.00``).
    """
    currency = (currency or DEFAULT_CURRENCY).upper()
    sign = "-" if amount < 0 else ""

    if currency == "NGN":
        return f"{sign}{_SYMBOLS['NGN']}{round(abs(amount)):,}"

    symbol = _SYMBOLS.get(currency)
    body = f"{abs(amount):,.2f}"
    if symbol:
        return f"{sign}{symbol}{body}"
    return f"{sign}{currency} {body}"

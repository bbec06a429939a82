"""Booking total amount rules.

A booking's total is fixed when it is created:

- referenced Service or Deal found with a non-zero unit price:
  ``unit price x number of people``
- otherwise: the amount the caller supplied, or 0
"""

from decimal import ROUND_HALF_UP, Decimal

DEAL_PREFIX = "deal-"
UNKNOWN_SERVICE_TITLE = "Unknown Service"

CENTS = Decimal("0.01")


def is_deal_reference(service_reference: str) -> bool:
    """Deals and services share the booking's ``service_id`` column; deals are prefixed."""
    return service_reference.startswith(DEAL_PREFIX)


def to_money(value: Decimal | float | int | str | None) -> Decimal:
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def calculate_total_amount(
    unit_price: Decimal | None,
    number_of_people: int | None,
    fallback_amount: Decimal | float | None = None,
) -> Decimal:
    """Compute a new booking's total amount.

    Args:
        unit_price: Price of the referenced Service or Deal, None if unresolved
        number_of_people: Party size, treated as 1 when missing
        fallback_amount: Amount supplied by the caller

    Returns:
        Decimal: Total rounded to cents
    """
    if unit_price:
        return to_money(Decimal(str(unit_price)) * (number_of_people or 1))
    return to_money(fallback_amount or 0)


def parse_price(value: str | float | int | Decimal | None) -> Decimal:
    """Parse a price entered in the admin UI, e.g. ``"$1,200"`` or ``"€ 45.50"``.

    Unparseable input yields 0.
    """
    if value is None:
        return Decimal("0.00")
    if isinstance(value, (int, float, Decimal)):
        return to_money(value)
    cleaned = "".join(ch for ch in value if ch not in "$,€£¥ \t")
    try:
        return to_money(cleaned or 0)
    except ArithmeticError:
        return Decimal("0.00")


def parse_discount_percentage(label: str | None) -> int:
    """Extract the digits of a discount label such as ``"25% OFF"``."""
    if not label:
        return 0
    digits = "".join(ch for ch in label if ch.isdigit())
    return int(digits) if digits else 0

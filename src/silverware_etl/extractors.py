"""Schema-tolerant field extraction for Silverware orders and lines.

Silverware tenants run different API versions and the same value can arrive
under several field names. Each logical value is read through an ordered
tuple of accessors; the first accessor yielding a usable value wins, so the
priority of candidate fields is explicit and testable on its own.

None of the functions in this module raise. Missing or unparseable fields
fall back to 0, an empty string, False or an empty list.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

Record = Mapping[str, Any]
Accessor = Callable[[Record], Any]

DEFAULT_FOOD_HINTS = ("food", "kitchen")
VOID_STATUSES = frozenset({"void", "voided"})


def accessor_for(name: str) -> Accessor:
    """Build an accessor reading ``name`` from a record."""

    def get(record: Record) -> Any:
        return record.get(name)

    get.__name__ = f"field_{name}"
    return get


def _fields(*names: str) -> tuple[Accessor, ...]:
    return tuple(accessor_for(n) for n in names)


LINE_TOTAL_FIELDS = _fields("NetTotal", "LineTotal", "ExtendedPrice", "Total", "Amount")
LINE_DISCOUNT_FIELDS = _fields("Discount", "DiscountAmount")
ORDER_DISCOUNT_FIELDS = _fields(
    "DiscountTotal", "PromotionsTotal", "CheckDiscountTotal", "TotalDiscount"
)
CATEGORY_FIELDS = _fields("SalesCategoryName", "CategoryName", "MenuGroup", "Family", "Category")
LINE_COLLECTION_FIELDS = _fields("Lines", "Items", "OrderLines", "OrderItems", "CheckLines")
ORDER_ID_FIELDS = _fields("OrderID", "Id", "ID")
ROW_COLLECTION_FIELDS = _fields("Orders", "Data")


def to_number(value: Any) -> float:
    """Coerce a loosely-typed value to a finite float.

    Numbers pass through, strings are parsed, everything else is 0.

    Examples:
        >>> to_number("12.50")
        12.5
        >>> to_number("n/a")
        0.0
        >>> to_number(None)
        0.0

    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def first_number(record: Any, accessors: Sequence[Accessor]) -> float:
    """Return the first non-zero number produced by ``accessors``, else 0."""
    if not isinstance(record, Mapping):
        return 0.0
    for accessor in accessors:
        number = to_number(accessor(record))
        if number:
            return number
    return 0.0


def first_text(record: Any, accessors: Sequence[Accessor]) -> str:
    """Return the first truthy value produced by ``accessors`` as text."""
    if not isinstance(record, Mapping):
        return ""
    for accessor in accessors:
        value = accessor(record)
        if not value:
            continue
        text = str(value)
        if text:
            return text
    return ""


def line_total(line: Any) -> float:
    return first_number(line, LINE_TOTAL_FIELDS)


def line_discount(line: Any) -> float:
    return first_number(line, LINE_DISCOUNT_FIELDS)


def order_header_discount(order: Any) -> float:
    """Discount recorded on the order itself rather than on a line."""
    return first_number(order, ORDER_DISCOUNT_FIELDS)


def line_category_name(line: Any) -> str:
    return first_text(line, CATEGORY_FIELDS).lower()


def parse_food_hints(raw: str | None) -> tuple[str, ...]:
    """Split a comma-separated hint list into lowercase, non-empty hints.

    Examples:
        >>> parse_food_hints(" Food, Kitchen ,,")
        ('food', 'kitchen')
        >>> parse_food_hints(None)
        ('food', 'kitchen')

    """
    if raw is None or not raw.strip():
        return DEFAULT_FOOD_HINTS
    return tuple(h.strip().lower() for h in raw.split(",") if h.strip())


def looks_like_food(line: Any, hints: Iterable[str] = DEFAULT_FOOD_HINTS) -> bool:
    """True if the line's category name contains any food hint."""
    name = line_category_name(line)
    return any(h in name for h in hints)


def is_voided(line: Any) -> bool:
    """True if the line is flagged void or carries a void status."""
    if not isinstance(line, Mapping):
        return False
    if line.get("IsVoid") is True or line.get("Voided") is True:
        return True
    status = line.get("Status")
    return status is not None and str(status).lower() in VOID_STATUSES


def _first_list(record: Any, accessors: Sequence[Accessor]) -> list[Any]:
    if not isinstance(record, Mapping):
        return []
    for accessor in accessors:
        value = accessor(record)
        if isinstance(value, list):
            return value
    return []


def order_lines(order: Any) -> list[Any]:
    """Return the line items embedded in an order, or an empty list."""
    return _first_list(order, LINE_COLLECTION_FIELDS)


def order_rows(payload: Any) -> list[Any]:
    """Locate the order rows in a GetOrders response.

    The body is either a bare array or an envelope carrying the rows under
    one of the known field names. Any other shape yields no rows.
    """
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, Mapping):
        return []
    for accessor in ROW_COLLECTION_FIELDS:
        value = accessor(payload)
        if value is not None:
            return value if isinstance(value, list) else []
    return []


def order_identifier(row: Any) -> Any:
    """Return the first present order id field, or None."""
    if not isinstance(row, Mapping):
        return None
    for accessor in ORDER_ID_FIELDS:
        value = accessor(row)
        if value is not None:
            return value
    return None

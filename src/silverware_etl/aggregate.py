"""Weekly aggregation of Silverware orders.

Orders for one location and week are paged out of the API and every line is
classified into a row of ``fact_order_line`` (one row per line, plus one
``header`` row per order carrying the order-level discount). The fact is
then reduced to the weekly totals written to Firestore:

- food:   non-voided lines whose category looks like food
- voids:  voided lines, whatever their category
- promos: line discounts (all lines) plus order header discounts

Every amount is clamped at zero before summing, so no upstream value can
reduce a total.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import pandas as pd

from silverware_etl.client import PAGE_SIZE
from silverware_etl.extractors import (
    DEFAULT_FOOD_HINTS,
    is_voided,
    line_category_name,
    line_discount,
    line_total,
    looks_like_food,
    order_header_discount,
    order_identifier,
    order_lines,
    order_rows,
)

if TYPE_CHECKING:
    from silverware_etl.client import SilverwareClient
    from silverware_etl.weeks import WeekWindow

logger = logging.getLogger(__name__)

FACT_COLUMNS = ["order_id", "kind", "category", "amount", "discount", "is_void", "is_food"]


@dataclass
class WeeklyTotals:
    """Aggregated totals for one location and week.

    Attributes:
        start: UTC start of the window (ISO-8601, ``Z``).
        end: UTC end of the window (ISO-8601, ``Z``).
        orders: Number of orders listed for the week.
        food: Gross food sales, rounded to cents.
        voids: Voided line amounts, rounded to cents.
        promos: Line and header discounts, rounded to cents.
    """

    start: str
    end: str
    orders: int
    food: float
    voids: float
    promos: float


def round_cents(value: float) -> float:
    """Round half-up to two decimals.

    Examples:
        >>> round_cents(0.125)
        0.13
        >>> round_cents(10.0)
        10.0

    """
    return math.floor(value * 100 + 0.5) / 100


def classify_line(order_id: Any, line: Any, food_hints: Iterable[str]) -> dict[str, Any]:
    """Turn one upstream line into a fact row."""
    void = is_voided(line)
    return {
        "order_id": order_id,
        "kind": "line",
        "category": line_category_name(line),
        "amount": line_total(line),
        "discount": line_discount(line),
        "is_void": void,
        "is_food": (not void) and looks_like_food(line, food_hints),
    }


def header_fact(order_id: Any, order: Any) -> dict[str, Any]:
    """Fact row for the discount recorded on the order header."""
    return {
        "order_id": order_id,
        "kind": "header",
        "category": "",
        "amount": 0.0,
        "discount": order_header_discount(order),
        "is_void": False,
        "is_food": False,
    }


def build_line_facts(
    client: SilverwareClient,
    window: WeekWindow,
    food_hints: Iterable[str] = DEFAULT_FOOD_HINTS,
) -> tuple[int, pd.DataFrame]:
    """Page through the week's orders and classify every line.

    Paging stops on an empty page or on a page shorter than PAGE_SIZE. Rows
    listed without embedded lines are re-fetched with GetOrder.

    Args:
        client: Client bound to one location.
        window: Week to fetch.
        food_hints: Lowercase category substrings identifying food.

    Returns:
        Tuple of (order count, fact_order_line DataFrame).

    Raises:
        ExtractionError: If any listing or detail call fails; nothing is
            returned for a partially read week.

    """
    hints = tuple(food_hints)
    facts: list[dict[str, Any]] = []
    orders = 0
    page = 1

    while True:
        payload = client.list_orders(window.start, window.end, page)
        rows = order_rows(payload)
        logger.debug("[%s] page %d: %d orders", client.location.key, page, len(rows))
        if not rows:
            break

        for row in rows:
            orders += 1
            order = row
            order_id = order_identifier(row)
            if not order_lines(row):
                if order_id is None:
                    logger.warning(
                        "[%s] order without lines or id on page %d; counting header only",
                        client.location.key,
                        page,
                    )
                else:
                    order = client.get_order(order_id)

            for line in order_lines(order):
                facts.append(classify_line(order_id, line, hints))
            facts.append(header_fact(order_id, order))

        if len(rows) < PAGE_SIZE:
            break
        page += 1

    return orders, pd.DataFrame(facts, columns=FACT_COLUMNS)


def summarize_lines(fact: pd.DataFrame) -> dict[str, float]:
    """Reduce fact_order_line to unrounded food/voids/promos sums."""
    if fact.empty:
        return {"food": 0.0, "voids": 0.0, "promos": 0.0}

    amount = fact["amount"].astype(float).clip(lower=0)
    discount = fact["discount"].astype(float).clip(lower=0)
    void = fact["is_void"].astype(bool)
    food = fact["is_food"].astype(bool) & ~void

    return {
        "food": float(amount[food].sum()),
        "voids": float(amount[void].sum()),
        "promos": float(discount.sum()),
    }


def collect_for_week(
    client: SilverwareClient,
    window: WeekWindow,
    food_hints: Iterable[str] = DEFAULT_FOOD_HINTS,
) -> WeeklyTotals:
    """Compute the weekly totals for the client's location.

    Args:
        client: Client bound to one location.
        window: Week to aggregate.
        food_hints: Lowercase category substrings identifying food.

    Returns:
        WeeklyTotals with currency values rounded to cents.

    """
    orders, fact = build_line_facts(client, window, food_hints)
    sums = summarize_lines(fact)
    return WeeklyTotals(
        start=window.start_iso,
        end=window.end_iso,
        orders=orders,
        food=round_cents(sums["food"]),
        voids=round_cents(sums["voids"]),
        promos=round_cents(sums["promos"]),
    )

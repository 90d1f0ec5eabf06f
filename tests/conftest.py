"""Shared fakes for the Silverware ETL tests.

No test here talks to the network or to Firestore: HTTP is replaced by a
scripted session, the order source by an in-memory page list, and the
document store by a recorder of merge writes.
"""

from __future__ import annotations

from typing import Any, Callable

import pytest
import requests

from silverware_etl.config import Location
from silverware_etl.exceptions import ExtractionError

_NO_JSON = object()


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self) -> Any:
        if self._payload is _NO_JSON:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeSession:
    """Session whose responses come from a handler.

    The handler receives (method, url, json_body) and returns a FakeResponse
    or raises (e.g. requests.ConnectionError).
    """

    def __init__(self, handler: Callable[[str, str, Any], FakeResponse]) -> None:
        self.handler = handler
        self.calls: list[tuple[str, str, Any]] = []
        self.closed = False

    def post(self, url: str, json: Any = None, timeout: Any = None) -> FakeResponse:
        self.calls.append(("POST", url, json))
        return self.handler("POST", url, json)

    def get(self, url: str, timeout: Any = None) -> FakeResponse:
        self.calls.append(("GET", url, None))
        return self.handler("GET", url, None)

    def close(self) -> None:
        self.closed = True


class FakeOrderClient:
    """In-memory order source with the SilverwareClient interface.

    Args:
        pages: Payloads returned for pages 1..n; later pages are empty.
        details: Order id -> GetOrder payload. Missing ids raise
            ExtractionError, as an API 404 would.
        fail_on_page: Raise ExtractionError when this page is requested.
    """

    def __init__(
        self,
        pages: list[Any],
        details: dict[Any, Any] | None = None,
        fail_on_page: int | None = None,
        key: str = "test",
    ) -> None:
        self.location = Location(key=key, base_url="https://sw.example.com", token="t")
        self.pages = pages
        self.details = details or {}
        self.fail_on_page = fail_on_page
        self.requested_pages: list[int] = []
        self.requested_orders: list[Any] = []
        self.closed = False

    def list_orders(self, start: Any, end: Any, page: int = 1) -> Any:
        self.requested_pages.append(page)
        if page == self.fail_on_page:
            raise ExtractionError("/api/ThirdParty/GetOrders", 500, "boom")
        if page <= len(self.pages):
            return self.pages[page - 1]
        return []

    def get_order(self, order_id: Any) -> Any:
        self.requested_orders.append(order_id)
        if order_id not in self.details:
            raise ExtractionError("/api/ThirdParty/GetOrder", 404, "not found")
        return self.details[order_id]

    def close(self) -> None:
        self.closed = True


class FakeDocument:
    def __init__(self, store: FakeFirestore, path: str) -> None:
        self.store = store
        self.path = path

    def set(self, data: dict[str, Any], merge: bool = False) -> None:
        self.store.writes.append((self.path, data, merge))
        if merge:
            existing = self.store.docs.setdefault(self.path, {})
            existing.update(data)
        else:
            self.store.docs[self.path] = dict(data)


class FakeFirestore:
    """Records document writes; top-level merge like Firestore set(merge=True)."""

    def __init__(self) -> None:
        self.writes: list[tuple[str, dict[str, Any], bool]] = []
        self.docs: dict[str, dict[str, Any]] = {}

    def document(self, path: str) -> FakeDocument:
        return FakeDocument(self, path)


@pytest.fixture
def fake_firestore() -> FakeFirestore:
    return FakeFirestore()


@pytest.fixture
def order_client_cls() -> type[FakeOrderClient]:
    return FakeOrderClient


@pytest.fixture
def session_cls() -> type[FakeSession]:
    return FakeSession


@pytest.fixture
def response_cls() -> type[FakeResponse]:
    return FakeResponse


@pytest.fixture
def no_json() -> object:
    return _NO_JSON


@pytest.fixture
def connection_error() -> type[Exception]:
    return requests.ConnectionError


@pytest.fixture
def sample_week_pages() -> list[Any]:
    """One page with the two orders from the reference scenario.

    Order A: one food line (10.00) and one discount line (2.00).
    Order B: one voided line (5.00) and a 1.00 header discount.
    """
    return [
        {
            "Orders": [
                {
                    "OrderID": "A",
                    "Lines": [
                        {"SalesCategoryName": "Food", "NetTotal": 10.00},
                        {"CategoryName": "Promo", "Discount": 2.00},
                    ],
                },
                {
                    "OrderID": "B",
                    "DiscountTotal": 1.00,
                    "Lines": [{"CategoryName": "Food", "Amount": 5.00, "IsVoid": True}],
                },
            ]
        }
    ]

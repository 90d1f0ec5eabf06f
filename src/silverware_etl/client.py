"""Silverware third-party API client.

Two calls are used: GetOrders (paged listing for a date range) and GetOrder
(one full order). Avrio4 tenants accept a JSON POST body; older tenants only
answer GET with the same parameters in the query string. Every call tries
the POST first and, if that fails for any reason, retries once as a GET.
There is no further retry.

The per-request timeout comes from RunSettings.timeout (SILVERWARE_TIMEOUT);
none is set by default.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any
from urllib.parse import urlencode

import requests

from silverware_etl.config import Location
from silverware_etl.exceptions import ExtractionError
from silverware_etl.weeks import format_instant

logger = logging.getLogger(__name__)

PAGE_SIZE = 500
GET_ORDERS_PATH = "/api/ThirdParty/GetOrders"
GET_ORDER_PATH = "/api/ThirdParty/GetOrder"


def make_session(token: str) -> requests.Session:
    """Create a requests Session authenticated for one Silverware tenant.

    Args:
        token: Bearer token for the location.

    Returns:
        Session with Authorization and JSON content headers set.

    """
    s = requests.Session()
    s.headers.update(
        {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
    )
    return s


class SilverwareClient:
    """Order source for a single location.

    Args:
        location: Location whose base URL and token are used.
        session: Optional pre-built session. A session passed in is not
            closed by close(); one built here is.
        timeout: Per-request timeout in seconds; None disables it.
    """

    def __init__(
        self,
        location: Location,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        self.location = location
        self.base_url = location.base_url.rstrip("/")
        self._owns_session = session is None
        self.session = session if session is not None else make_session(location.token)
        self.timeout = timeout

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> SilverwareClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _request(self, path: str, body: Mapping[str, Any] | None = None) -> Any:
        """Send one request and decode the JSON body.

        A body means POST, no body means GET.

        Raises:
            ExtractionError: On transport failure, non-2xx status or a body
                that is not JSON.

        """
        url = f"{self.base_url}{path}"
        try:
            if body is not None:
                resp = self.session.post(url, json=dict(body), timeout=self.timeout)
            else:
                resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise ExtractionError(path, None, str(e)) from e

        if not (200 <= resp.status_code < 300):
            raise ExtractionError(path, resp.status_code, resp.text)
        try:
            return resp.json()
        except ValueError as e:
            raise ExtractionError(path, resp.status_code, f"invalid JSON: {resp.text[:400]}") from e

    def _with_fallback(self, path: str, params: Mapping[str, Any]) -> Any:
        """POST ``params`` as JSON; on failure GET them as a query string.

        Raises:
            ExtractionError: From the GET attempt when both encodings fail.

        """
        try:
            return self._request(path, body=params)
        except ExtractionError as e:
            logger.debug("[%s] POST %s failed (%s); retrying as GET", self.location.key, path, e)

        qs = urlencode({k: str(v) for k, v in params.items()})
        return self._request(f"{path}?{qs}")

    def list_orders(self, start: datetime, end: datetime, page: int = 1) -> Any:
        """Fetch one page of orders active in ``[start, end)``.

        Args:
            start: Inclusive UTC start instant.
            end: Exclusive UTC end instant.
            page: 1-based page number.

        Returns:
            The decoded response body, unmodified. Use
            ``extractors.order_rows`` to locate the rows.

        """
        params = {
            "StartDate": format_instant(start),
            "EndDate": format_instant(end),
            "Page": page,
            "PageSize": PAGE_SIZE,
        }
        return self._with_fallback(GET_ORDERS_PATH, params)

    def get_order(self, order_id: Any) -> Any:
        """Fetch the full detail (with lines) of one order."""
        return self._with_fallback(GET_ORDER_PATH, {"OrderID": order_id})

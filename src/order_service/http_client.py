"""Order API client over httpx (async)."""

import asyncio
from datetime import date
from typing import Any

import httpx

from src.config import ORDER_API_BASE_URL, ORDER_API_TIMEOUT_SECONDS, ORDER_API_TOKEN
from src.models.orders import Order, OrderLineItem, Route
from src.order_service.errors import OrderServiceError
from src.order_service.protocol import SlipStatusKind
from src.utils.logger import get_logger

logger = get_logger("dispatch_slips.order_service.http")

STATUS_ENDPOINTS: dict[str, str] = {
    "loading": "/update-loading-slip-status",
    "delivery": "/update-delivery-slip-status",
}

CUSTOMER_ROUTE_OK = "User routes fetched successfully"


def _is_transient_network_error(e: Exception) -> bool:
    """True for connection-level failures worth one more try (not HTTP status errors)."""
    return isinstance(
        e,
        (
            httpx.ConnectError,
            httpx.ReadError,
            httpx.WriteError,
            httpx.RemoteProtocolError,
            httpx.PoolTimeout,
        ),
    )


def _date_param(value: date | str | None) -> str | None:
    if value is None or value == "":
        return None
    return value.isoformat() if isinstance(value, date) else str(value)


class HttpOrderService:
    """Order API over HTTP with bearer-token auth.

    Pass http_client to share a pooled client (its base_url/headers are not
    touched); otherwise one is created and closed by aclose().
    """

    def __init__(
        self,
        base_url: str = ORDER_API_BASE_URL,
        token: str = ORDER_API_TOKEN,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = ORDER_API_TIMEOUT_SECONDS,
        max_attempts: int = 3,
    ):
        self._base_url = base_url.rstrip("/")
        self._headers = {"Content-Type": "application/json"}
        if token:
            self._headers["Authorization"] = f"Bearer {token}"
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
        )
        self._max_attempts = max(1, max_attempts)
        logger.info("order_service.init", base_url=self._base_url, auth=bool(token))

    async def __aenter__(self) -> "HttpOrderService":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        order_id: int | str | None = None,
    ) -> Any:
        url = f"{self._base_url}{path}"
        for attempt in range(self._max_attempts):
            try:
                response = await self._client.request(
                    method, url, params=params, json=json, headers=self._headers
                )
            except httpx.HTTPError as e:
                if _is_transient_network_error(e) and attempt < self._max_attempts - 1:
                    delay = 0.5 * (2**attempt)
                    logger.debug(
                        "order_service.retry",
                        path=path,
                        attempt=attempt + 1,
                        delay=delay,
                        error=str(e),
                    )
                    await asyncio.sleep(delay)
                    continue
                raise OrderServiceError(
                    f"{method} {path} failed: {e}", order_id=order_id
                ) from e
            if response.is_error:
                logger.warning(
                    "order_service.http_error",
                    method=method,
                    path=path,
                    status=response.status_code,
                    order_id=order_id,
                )
                raise OrderServiceError(
                    f"{method} {path} returned HTTP {response.status_code}",
                    status_code=response.status_code,
                    order_id=order_id,
                )
            try:
                return response.json()
            except ValueError as e:
                raise OrderServiceError(
                    f"{method} {path} returned invalid JSON",
                    status_code=response.status_code,
                    order_id=order_id,
                ) from e
        raise OrderServiceError(f"{method} {path} failed", order_id=order_id)

    async def get_orders(
        self, from_date: date | str | None = None, to_date: date | str | None = None
    ) -> list[Order]:
        params = {}
        if (f := _date_param(from_date)) is not None:
            params["from_date"] = f
        if (t := _date_param(to_date)) is not None:
            params["to_date"] = t
        payload = await self._request("GET", "/get-all-orders", params=params)
        rows = payload.get("data", []) if isinstance(payload, dict) else payload
        orders = [Order.model_validate(r) for r in rows or []]
        logger.info("order_service.orders_fetched", count=len(orders), **params)
        return orders

    async def get_order_line_items(self, order_id: int | str) -> list[OrderLineItem]:
        payload = await self._request(
            "GET", "/order-products", params={"orderId": order_id}, order_id=order_id
        )
        if not isinstance(payload, list):
            raise OrderServiceError(
                f"Unexpected line items payload for order {order_id}", order_id=order_id
            )
        return [OrderLineItem.model_validate(r) for r in payload]

    async def get_customer_route(self, customer_id: int | str) -> str | None:
        payload = await self._request("GET", "/fetch-routes", params={"customer_id": customer_id})
        if not isinstance(payload, dict) or payload.get("message") != CUSTOMER_ROUTE_OK:
            return None
        customers = payload.get("customers") or []
        if not customers:
            return None
        return customers[0].get("route") or None

    async def get_routes(self) -> list[Route]:
        payload = await self._request("GET", "/routes_crud")
        routes = [Route.model_validate(r) for r in payload or []]
        return sorted(routes, key=lambda r: (0, int(r.id)) if str(r.id).isdigit() else (1, str(r.id)))

    async def update_slip_status(self, kind: SlipStatusKind, order_id: int | str) -> dict:
        path = STATUS_ENDPOINTS.get(kind)
        if path is None:
            raise ValueError(f"Unknown slip kind: {kind!r}")
        payload = await self._request("POST", path, json={"orderId": order_id}, order_id=order_id)
        return payload if isinstance(payload, dict) else {"response": payload}

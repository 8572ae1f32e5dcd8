"""Mock order service: reads orders, line items and routes from a JSON file, records status updates in memory."""

import json
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

from src.models.orders import Order, OrderLineItem, Route
from src.order_service.errors import OrderServiceError
from src.order_service.protocol import SlipStatusKind
from src.utils.logger import get_logger

logger = get_logger("dispatch_slips.order_service.mock")


def _as_date(value: date | str | None) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


class MockOrderService:
    """In-memory order service.

    Document shape::

        {
          "orders": [{"id": 1, "customer_id": 7, ...}],
          "order_products": {"1": [{"name": "...", "quantity": 2, "category": "Milk"}]},
          "customer_routes": {"7": "North"},
          "routes": [{"id": 1, "name": "North"}]
        }

    failing_order_ids makes get_order_line_items raise for those ids;
    failing_status_order_ids does the same for update_slip_status.
    """

    def __init__(
        self,
        data: dict[str, Any] | None = None,
        path: Path | None = None,
        failing_order_ids: set[int | str] | None = None,
        failing_status_order_ids: set[int | str] | None = None,
    ):
        if data is None and path is not None:
            data = self._load(path)
        data = data or {}
        self._orders = [Order.model_validate(o) for o in data.get("orders", [])]
        self._order_products: dict[str, list[dict[str, Any]]] = {
            str(k): v for k, v in (data.get("order_products") or {}).items()
        }
        self._customer_routes: dict[str, str] = {
            str(k): v for k, v in (data.get("customer_routes") or {}).items()
        }
        self._routes = [Route.model_validate(r) for r in data.get("routes", [])]
        self._failing = {str(i) for i in (failing_order_ids or ())}
        self._failing_status = {str(i) for i in (failing_status_order_ids or ())}
        self.status_updates: list[tuple[str, int | str]] = []
        self.line_item_calls: list[int | str] = []
        logger.info(
            "mock_order_service.init",
            orders=len(self._orders),
            routes=len(self._routes),
            path=str(path) if path else None,
        )

    @staticmethod
    def _load(path: Path) -> dict[str, Any]:
        if not path.exists():
            logger.warning("mock_order_service.file_missing", path=str(path))
            return {}
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)

    async def get_orders(
        self, from_date: date | str | None = None, to_date: date | str | None = None
    ) -> list[Order]:
        start, end = _as_date(from_date), _as_date(to_date)
        out = []
        for order in self._orders:
            if order.placed_on is not None and (start or end):
                placed = datetime.fromtimestamp(order.placed_on, tz=timezone.utc).date()
                if start and placed < start:
                    continue
                if end and placed > end:
                    continue
            out.append(order)
        return out

    async def get_order_line_items(self, order_id: int | str) -> list[OrderLineItem]:
        self.line_item_calls.append(order_id)
        if str(order_id) in self._failing:
            raise OrderServiceError(
                "GET /order-products returned HTTP 500", status_code=500, order_id=order_id
            )
        return [OrderLineItem.model_validate(r) for r in self._order_products.get(str(order_id), [])]

    async def get_customer_route(self, customer_id: int | str) -> str | None:
        return self._customer_routes.get(str(customer_id))

    async def get_routes(self) -> list[Route]:
        return list(self._routes)

    async def update_slip_status(self, kind: SlipStatusKind, order_id: int | str) -> dict:
        if str(order_id) in self._failing_status:
            raise OrderServiceError(
                f"POST {kind} slip status returned HTTP 500", status_code=500, order_id=order_id
            )
        self.status_updates.append((kind, order_id))
        return {"message": f"{kind.capitalize()} slip status updated", "orderId": order_id}

"""Order service protocol: the remote collaborators slip generation reads from and reports to."""

from datetime import date
from typing import Literal, Protocol

from src.models.orders import Order, OrderLineItem, Route

SlipStatusKind = Literal["loading", "delivery"]


class OrderService(Protocol):
    """Orders query, order line items, route master data and slip-status updates."""

    async def get_orders(
        self, from_date: date | str | None = None, to_date: date | str | None = None
    ) -> list[Order]:
        """Orders placed within [from_date, to_date] (either bound optional)."""
        ...

    async def get_order_line_items(self, order_id: int | str) -> list[OrderLineItem]:
        """Line items of one order. Raises OrderServiceError on failure."""
        ...

    async def get_customer_route(self, customer_id: int | str) -> str | None:
        """Route name assigned to a customer, or None when unassigned."""
        ...

    async def get_routes(self) -> list[Route]:
        """Route catalogue, sorted by id."""
        ...

    async def update_slip_status(self, kind: SlipStatusKind, order_id: int | str) -> dict:
        """Mark an order's loading or delivery slip as generated. Raises OrderServiceError on failure."""
        ...

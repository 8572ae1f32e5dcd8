"""Route bucketing and order eligibility filters."""

from collections.abc import Iterable, Mapping, Sequence

from src.models.orders import Order, Route

UNROUTED = "Unrouted"

ORDER_TYPE_FILTERS = ("All", "AM", "PM + Evening")

CustomerRoutes = Mapping[int | str, str]


def route_for_customer(customer_routes: CustomerRoutes, customer_id: int | str) -> str | None:
    """Route name for a customer. Keys may be ints or their string form (JSON objects)."""
    candidates: list[int | str] = [customer_id, str(customer_id)]
    if isinstance(customer_id, str) and customer_id.strip().isdigit():
        candidates.append(int(customer_id))
    for key in candidates:
        route = customer_routes.get(key)
        if route:
            return route
    return None


def group_orders_by_route(
    orders: Iterable[Order],
    customer_routes: CustomerRoutes,
) -> dict[str, list[Order]]:
    """Partition orders by their customer's route; unknown customers go to UNROUTED.

    Buckets appear in first-seen order and keep input order inside. No dedup.
    """
    buckets: dict[str, list[Order]] = {}
    for order in orders:
        route = route_for_customer(customer_routes, order.customer_id) or UNROUTED
        buckets.setdefault(route, []).append(order)
    return buckets


def filter_orders_by_routes(
    orders: Sequence[Order],
    selected_routes: str | Sequence[str] | None,
    customer_routes: CustomerRoutes,
    routes: Sequence[Route] = (),
) -> list[Order]:
    """Keep orders whose customer is on one of the selected routes.

    A customer's stored route may be the route name (any case) or the route id,
    so a selected name also matches the id of the catalogue route with that name.
    No selection keeps everything.
    """
    if not selected_routes:
        return list(orders)
    wanted = [selected_routes] if isinstance(selected_routes, str) else list(selected_routes)
    by_name = {r.name: r for r in routes}

    def matches(customer_route: str | None, selected: str) -> bool:
        if customer_route is None:
            return False
        if customer_route == selected:
            return True
        if selected and customer_route.lower() == selected.lower():
            return True
        route = by_name.get(selected)
        if route is not None and customer_route in (str(route.id), route.name):
            return True
        return False

    return [
        order
        for order in orders
        if any(matches(route_for_customer(customer_routes, order.customer_id), s) for s in wanted)
    ]


def filter_eligible_orders(orders: Iterable[Order], order_type: str = "All") -> list[Order]:
    """Accepted, non-cancelled orders of the requested type ("All", "AM", "PM + Evening")."""
    if order_type not in ORDER_TYPE_FILTERS:
        raise ValueError(f"Unknown order type filter: {order_type!r}. Expected one of {ORDER_TYPE_FILTERS}")
    out = []
    for order in orders:
        if order_type == "AM" and order.order_type != "AM":
            continue
        if order_type == "PM + Evening" and order.order_type not in ("PM", "Evening"):
            continue
        if order.approve_status != "Accepted" or order.cancelled == "Yes":
            continue
        out.append(order)
    return out


def select_orders(orders: Iterable[Order], order_ids: Iterable[int | str] | None) -> list[Order]:
    """Restrict to explicitly selected order ids; an empty selection keeps all."""
    ids = {str(i) for i in (order_ids or ())}
    if not ids:
        return list(orders)
    return [o for o in orders if str(o.id) in ids]

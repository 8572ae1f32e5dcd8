"""Fold order line items into per-product (loading slip) or per-customer (delivery slip) totals.

Line items are fetched per order through a caller-supplied coroutine, with a
bounded number of fetches in flight. A failed fetch skips that order only;
the rest of the route is still consolidated. Folding happens after all fetches
complete, in input order, so results do not depend on completion order.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Literal

from opentelemetry.trace import Status, StatusCode

from src.config import CATEGORY_CONFLICT_POLICY, LINE_ITEM_FETCH_CONCURRENCY
from src.models.orders import Order, OrderLineItem
from src.models.slips import (
    ConsolidatedProduct,
    ConsolidationResult,
    CustomerLines,
    DeliverySlipData,
)
from src.slips.errors import CategoryConflictError
from src.slips.units import RegexUnitExtractor, UnitExtractor, to_base_units, to_crates
from src.utils.logger import get_logger
from src.utils.tracing import get_tracer

logger = get_logger("dispatch_slips.slips.consolidation")

LineItemFetcher = Callable[[int | str], Awaitable[Sequence[OrderLineItem | dict[str, Any]]]]
CategoryPolicy = Literal["last", "first", "strict"]

UNKNOWN_CATEGORY = "Unknown"

# Running base-unit totals are rounded to this many decimals after each addition.
BASE_UNIT_DECIMALS = 6


def _add_base_units(total: float, base: float) -> float:
    return round(total + base, BASE_UNIT_DECIMALS)


async def fetch_line_items_for_orders(
    orders: Sequence[Order],
    fetch_line_items: LineItemFetcher,
    concurrency: int = LINE_ITEM_FETCH_CONCURRENCY,
) -> list[tuple[Order, list[OrderLineItem] | None]]:
    """Fetch every order's line items. None in place of the list marks a failed order."""
    semaphore = asyncio.Semaphore(max(1, concurrency))
    tracer = get_tracer()

    async def fetch_one(order: Order) -> tuple[Order, list[OrderLineItem] | None]:
        async with semaphore:
            with tracer.start_as_current_span(
                "fetch_line_items", attributes={"order.id": str(order.id)}
            ) as span:
                try:
                    raw = await fetch_line_items(order.id)
                    items = [
                        item if isinstance(item, OrderLineItem) else OrderLineItem.model_validate(item)
                        for item in raw or []
                    ]
                except Exception as e:
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    logger.warning(
                        "consolidate.fetch_failed",
                        order_id=order.id,
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                    return order, None
                span.set_attribute("order.line_items", len(items))
                logger.debug("consolidate.fetched", order_id=order.id, line_items=len(items))
                return order, items

    return list(await asyncio.gather(*(fetch_one(o) for o in orders)))


def _resolve_category(
    product: ConsolidatedProduct,
    incoming: str | None,
    policy: CategoryPolicy,
) -> None:
    if not incoming or incoming == product.category:
        return
    if product.category == UNKNOWN_CATEGORY:
        product.category = incoming
        return
    if policy == "strict":
        raise CategoryConflictError(product.name, product.category, incoming)
    logger.warning(
        "consolidate.category_conflict",
        product=product.name,
        kept=incoming if policy == "last" else product.category,
        dropped=product.category if policy == "last" else incoming,
        policy=policy,
    )
    if policy == "last":
        product.category = incoming


def fold_line_item(
    products: dict[str, ConsolidatedProduct],
    item: OrderLineItem,
    extractor: UnitExtractor,
    category_policy: CategoryPolicy = "last",
) -> ConsolidatedProduct:
    """Add one line item into the running total for its exact product name."""
    base = to_base_units(extractor.extract(item.product_name), item.quantity)
    product = products.get(item.product_name)
    if product is None:
        product = ConsolidatedProduct(
            name=item.product_name,
            category=item.category or UNKNOWN_CATEGORY,
        )
        products[item.product_name] = product
    else:
        _resolve_category(product, item.category, category_policy)
    product.total_quantity += item.quantity
    product.total_base_unit_quantity = _add_base_units(product.total_base_unit_quantity, base)
    product.total_crates = to_crates(product.total_base_unit_quantity)
    return product


async def consolidate(
    orders: Sequence[Order],
    fetch_line_items: LineItemFetcher,
    *,
    extractor: UnitExtractor | None = None,
    concurrency: int = LINE_ITEM_FETCH_CONCURRENCY,
    category_policy: CategoryPolicy = CATEGORY_CONFLICT_POLICY,
) -> ConsolidationResult:
    """Consolidate all line items of a route bucket by product name."""
    if category_policy not in ("last", "first", "strict"):
        raise ValueError(f"Unknown category policy: {category_policy!r}")
    extractor = extractor or RegexUnitExtractor()
    tracer = get_tracer()
    with tracer.start_as_current_span(
        "consolidate_route", attributes={"route.orders": len(orders)}
    ) as span:
        fetched = await fetch_line_items_for_orders(orders, fetch_line_items, concurrency)
        result = ConsolidationResult()
        for order, items in fetched:
            if items is None:
                result.failed_order_ids.append(order.id)
                continue
            result.fetched_order_ids.append(order.id)
            for item in items:
                fold_line_item(result.products, item, extractor, category_policy)
        span.set_attribute("route.products", len(result.products))
        span.set_attribute("route.failed_orders", len(result.failed_order_ids))
        logger.info(
            "consolidate.done",
            orders=len(orders),
            products=len(result.products),
            failed_orders=len(result.failed_order_ids),
        )
        return result


async def collect_customer_lines(
    orders: Sequence[Order],
    fetch_line_items: LineItemFetcher,
    route_name: str,
    *,
    extractor: UnitExtractor | None = None,
    concurrency: int = LINE_ITEM_FETCH_CONCURRENCY,
) -> DeliverySlipData:
    """Build the customer x product matrix for a delivery slip.

    Orders of the same customer merge into one column. Customers whose orders
    all failed to fetch get no column.
    """
    extractor = extractor or RegexUnitExtractor()
    fetched = await fetch_line_items_for_orders(orders, fetch_line_items, concurrency)
    data = DeliverySlipData(route_name=route_name)
    columns: dict[str, CustomerLines] = {}
    seen_products: dict[str, None] = {}
    for order, items in fetched:
        if items is None:
            data.failed_order_ids.append(order.id)
            continue
        data.fetched_order_ids.append(order.id)
        key = str(order.customer_id)
        column = columns.get(key)
        if column is None:
            column = CustomerLines(
                customer_id=order.customer_id,
                customer_name=order.customer_name or f"Customer {order.customer_id}",
            )
            columns[key] = column
        column.order_ids.append(order.id)
        for item in items:
            name = item.product_name
            seen_products.setdefault(name, None)
            base = to_base_units(extractor.extract(name), item.quantity)
            column.quantities[name] = column.quantities.get(name, 0) + item.quantity
            column.base_unit_quantities[name] = _add_base_units(
                column.base_unit_quantities.get(name, 0.0), base
            )
            column.crates[name] = to_crates(column.base_unit_quantities[name])
    data.customers = list(columns.values())
    data.product_names = list(seen_products)
    logger.info(
        "delivery.collect_done",
        route=route_name,
        customers=len(data.customers),
        products=len(data.product_names),
        failed_orders=len(data.failed_order_ids),
    )
    return data

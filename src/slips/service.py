"""Orchestrate slip generation: orders -> route buckets -> consolidate -> render -> workbook -> status updates."""

import asyncio
from collections.abc import Iterable, Sequence
from datetime import date
from pathlib import Path
from time import perf_counter

from opentelemetry.trace import Status, StatusCode

from src.config import CATEGORY_CONFLICT_POLICY, LINE_ITEM_FETCH_CONCURRENCY, OUTPUT_DIR
from src.models.orders import Order
from src.models.slips import (
    RouteSlip,
    SlipKind,
    SlipRun,
    StatusUpdateResult,
    StatusUpdateSummary,
)
from src.order_service.protocol import OrderService
from src.slips.brands import aggregate_brands
from src.slips.consolidation import CategoryPolicy, collect_customer_lines, consolidate
from src.slips.errors import NothingToExportError
from src.slips.render import DELIVERY_HEADER_ROW, render_delivery_slip, render_loading_slip
from src.slips.routing import (
    CustomerRoutes,
    filter_eligible_orders,
    filter_orders_by_routes,
    group_orders_by_route,
    select_orders,
)
from src.slips.units import UnitExtractor
from src.slips.workbook import build_slip_workbook, save_workbook
from src.utils.logger import get_logger, log_step
from src.utils.tracing import get_tracer

logger = get_logger("dispatch_slips.slips.service")

REPORT_TITLES: dict[str, str] = {
    "loading": "Loading Slip",
    "delivery": "Delivery Slip",
}


async def build_customer_routes(
    service: OrderService,
    customer_ids: Iterable[int | str],
) -> dict[str, str]:
    """customer_id (as str) -> route name. Lookups that fail or return nothing are left out."""
    routes: dict[str, str] = {}
    for customer_id in customer_ids:
        key = str(customer_id)
        if key in routes:
            continue
        try:
            route = await service.get_customer_route(customer_id)
        except Exception as e:
            logger.warning("customer_routes.lookup_failed", customer_id=customer_id, error=str(e))
            continue
        if route:
            routes[key] = route
    logger.debug("customer_routes.built", customers=len(routes))
    return routes


async def update_slip_statuses(
    service: OrderService,
    kind: SlipKind,
    order_ids: Sequence[int | str],
) -> StatusUpdateSummary:
    """Mark every order as slip-generated. Failures are collected, never raised."""
    tracer = get_tracer()

    async def update_one(order_id: int | str) -> StatusUpdateResult:
        try:
            response = await service.update_slip_status(kind, order_id)
        except Exception as e:
            logger.warning("status_update.failed", kind=kind, order_id=order_id, error=str(e))
            return StatusUpdateResult(order_id=order_id, success=False, error=str(e))
        message = response.get("message") if isinstance(response, dict) else None
        logger.debug("status_update.ok", kind=kind, order_id=order_id, message=message)
        return StatusUpdateResult(order_id=order_id, success=True, message=message)

    with tracer.start_as_current_span(
        "update_slip_status", attributes={"slip.kind": kind, "slip.orders": len(order_ids)}
    ) as span:
        results = list(await asyncio.gather(*(update_one(i) for i in order_ids)))
        succeeded = sum(1 for r in results if r.success)
        summary = StatusUpdateSummary(
            succeeded=succeeded, failed=len(results) - succeeded, results=results
        )
        span.set_attribute("slip.status_failed", summary.failed)
        return summary


class SlipGenerator:
    """Generates loading or delivery slips per route for a set of orders."""

    def __init__(
        self,
        service: OrderService,
        *,
        extractor: UnitExtractor | None = None,
        concurrency: int = LINE_ITEM_FETCH_CONCURRENCY,
        category_policy: CategoryPolicy = CATEGORY_CONFLICT_POLICY,
        sort_brands: bool = False,
    ):
        self._service = service
        self._extractor = extractor
        self._concurrency = concurrency
        self._category_policy = category_policy
        self._sort_brands = sort_brands

    async def _loading_slip(
        self, route_name: str, orders: Sequence[Order]
    ) -> tuple[RouteSlip | None, list[int | str]]:
        result = await consolidate(
            orders,
            self._service.get_order_line_items,
            extractor=self._extractor,
            concurrency=self._concurrency,
            category_policy=self._category_policy,
        )
        if not result.products:
            return None, result.failed_order_ids
        brand_totals = aggregate_brands(result.products, sort=self._sort_brands)
        title = REPORT_TITLES["loading"]
        grid = render_loading_slip(result.products, brand_totals, route_name, title)
        slip = RouteSlip(
            route_name=route_name,
            order_ids=result.fetched_order_ids,
            workbook=build_slip_workbook(grid, title, route_name),
            products=list(result.products.values()),
            brand_totals=brand_totals,
        )
        return slip, result.failed_order_ids

    async def _delivery_slip(
        self, route_name: str, orders: Sequence[Order]
    ) -> tuple[RouteSlip | None, list[int | str]]:
        data = await collect_customer_lines(
            orders,
            self._service.get_order_line_items,
            route_name,
            extractor=self._extractor,
            concurrency=self._concurrency,
        )
        if not data.product_names:
            return None, data.failed_order_ids
        title = REPORT_TITLES["delivery"]
        grid = render_delivery_slip(data, route_name, title)
        slip = RouteSlip(
            route_name=route_name,
            order_ids=data.fetched_order_ids,
            workbook=build_slip_workbook(
                grid, title, route_name, vertical_header_row=DELIVERY_HEADER_ROW
            ),
        )
        return slip, data.failed_order_ids

    async def generate(
        self,
        kind: SlipKind,
        orders: Sequence[Order],
        customer_routes: CustomerRoutes,
        *,
        download_only: bool = True,
        output_dir: Path | None = None,
    ) -> SlipRun:
        """Build one slip per route bucket.

        download_only saves each workbook under output_dir; otherwise workbooks
        are only returned (bytes + base64) for preview. Only orders whose line
        items were fetched get their slip status updated. If any route fails
        to build, nothing is saved and no status is updated.
        """
        if kind not in REPORT_TITLES:
            raise ValueError(f"Unknown slip kind: {kind!r}")
        title = REPORT_TITLES[kind]
        if not orders:
            raise NothingToExportError(f"No orders available to generate {title.lower()}s.")

        tracer = get_tracer()
        start = perf_counter()
        log = logger.bind(kind=kind, orders=len(orders))
        log.info("generate_slips.start")
        run = SlipRun(kind=kind)

        with tracer.start_as_current_span(
            "generate_slips", attributes={"slip.kind": kind, "slip.orders": len(orders)}
        ) as root_span:
            buckets = group_orders_by_route(orders, customer_routes)
            log_step("routing", "generate_slips.routes", {r: len(o) for r, o in buckets.items()})
            build = self._loading_slip if kind == "loading" else self._delivery_slip
            # All routes are built before any workbook is saved or status posted.
            for route_name, route_orders in buckets.items():
                try:
                    slip, failed = await build(route_name, route_orders)
                except Exception as e:
                    root_span.set_status(Status(StatusCode.ERROR, str(e)))
                    log.error("generate_slips.route_failed", route=route_name, error=str(e))
                    raise
                run.failed_order_ids.extend(failed)
                if slip is None:
                    run.empty_routes.append(route_name)
                    log.warning("generate_slips.route_empty", route=route_name, failed_orders=len(failed))
                    continue
                run.slips.append(slip)

            if not run.slips:
                root_span.set_status(Status(StatusCode.ERROR, "nothing to export"))
                log.warning("generate_slips.nothing_to_export", empty_routes=run.empty_routes)
                raise NothingToExportError(f"No products found for the selected orders; no {title.lower()} generated.")

            if download_only:
                for slip in run.slips:
                    slip.saved_path = str(save_workbook(slip.workbook, output_dir or OUTPUT_DIR))

            for slip in run.slips:
                run.status = run.status.merge(
                    await update_slip_statuses(self._service, kind, slip.order_ids)
                )
                log.info(
                    "generate_slips.route_done",
                    route=slip.route_name,
                    filename=slip.workbook.filename,
                    orders=len(slip.order_ids),
                )

            root_span.set_attribute("slip.routes", len(run.slips))
            log.info(
                "generate_slips.complete",
                routes=len(run.slips),
                empty_routes=len(run.empty_routes),
                failed_orders=len(run.failed_order_ids),
                status_succeeded=run.status.succeeded,
                status_failed=run.status.failed,
                duration_ms=round((perf_counter() - start) * 1000, 1),
            )
        return run

    async def generate_loading_slips(
        self,
        orders: Sequence[Order],
        customer_routes: CustomerRoutes,
        *,
        download_only: bool = True,
        output_dir: Path | None = None,
    ) -> SlipRun:
        return await self.generate(
            "loading", orders, customer_routes, download_only=download_only, output_dir=output_dir
        )

    async def generate_delivery_slips(
        self,
        orders: Sequence[Order],
        customer_routes: CustomerRoutes,
        *,
        download_only: bool = True,
        output_dir: Path | None = None,
    ) -> SlipRun:
        return await self.generate(
            "delivery", orders, customer_routes, download_only=download_only, output_dir=output_dir
        )


async def generate_slips_for_range(
    service: OrderService,
    kind: SlipKind,
    *,
    from_date: date | str | None = None,
    to_date: date | str | None = None,
    order_type: str = "All",
    routes: Sequence[str] = (),
    order_ids: Sequence[int | str] = (),
    download_only: bool = True,
    output_dir: Path | None = None,
    generator: SlipGenerator | None = None,
) -> SlipRun:
    """Fetch orders for a date range, apply the dashboard filters, then generate slips."""
    orders = await service.get_orders(from_date, to_date)
    customer_routes = await build_customer_routes(service, (o.customer_id for o in orders))
    catalogue = await service.get_routes() if routes else []
    selected = filter_orders_by_routes(orders, list(routes), customer_routes, catalogue)
    selected = filter_eligible_orders(selected, order_type)
    selected = select_orders(selected, order_ids)
    logger.info(
        "generate_slips.selected",
        kind=kind,
        fetched=len(orders),
        selected=len(selected),
        order_type=order_type,
        routes=list(routes),
    )
    generator = generator or SlipGenerator(service)
    return await generator.generate(
        kind, selected, customer_routes, download_only=download_only, output_dir=output_dir
    )

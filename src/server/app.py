"""FastAPI app: generate loading / delivery slips and preview them as JSON."""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException

from src.models.slips import SlipRun
from src.order_service import HttpOrderService, OrderService, OrderServiceError
from src.server.models import ParseUnitRequest, SlipRequest
from src.slips.errors import SlipError
from src.slips.service import generate_slips_for_range
from src.slips.units import parse_unit, to_base_units, to_crates
from src.utils.logger import bind_context, clear_context, get_logger

logger = get_logger("dispatch_slips.server")

SLIP_KINDS = ("loading", "delivery")


def slip_run_to_preview(run: SlipRun) -> dict[str, Any]:
    """JSON-friendly view of a run: grids and base64 workbooks, no raw bytes."""
    return {
        "kind": run.kind,
        "slips": [
            {
                "route_name": s.route_name,
                "filename": s.workbook.filename,
                "order_ids": s.order_ids,
                "grid": s.workbook.grid,
                "base64": s.workbook.base64,
                "saved_path": s.saved_path,
                "brand_totals": [b.model_dump() for b in s.brand_totals],
            }
            for s in run.slips
        ],
        "empty_routes": run.empty_routes,
        "failed_order_ids": run.failed_order_ids,
        "status": {
            "succeeded": run.status.succeeded,
            "failed": run.status.failed,
            "failures": [r.model_dump() for r in run.status.results if not r.success],
        },
    }


@asynccontextmanager
async def _lifespan(app: FastAPI, create_service: bool = True):
    """Create the HTTP order service in the server's event loop; close it on shutdown."""
    if create_service:
        app.state.order_service = HttpOrderService()
        logger.info("server.lifespan.service_created")
    yield
    service = getattr(app.state, "order_service", None)
    if create_service and isinstance(service, HttpOrderService):
        try:
            await service.aclose()
        except Exception as e:
            logger.debug("server.lifespan.service_close_error", error=str(e))


def create_app(service: OrderService | None = None) -> FastAPI:
    """Create the FastAPI app. Pass service (e.g. MockOrderService) to skip creating the HTTP client."""
    create_service_in_lifespan = service is None
    app = FastAPI(
        title="Dispatch Slips",
        version="0.1.0",
        lifespan=lambda app: _lifespan(app, create_service=create_service_in_lifespan),
    )
    if service is not None:
        app.state.order_service = service

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/slips/{kind}")
    async def generate_slips(kind: str, body: SlipRequest) -> dict[str, Any]:
        """Generate one slip per route for the filtered orders and return a preview."""
        if kind not in SLIP_KINDS:
            raise HTTPException(status_code=404, detail=f"Unknown slip kind: {kind!r}")
        bind_context(slip_kind=kind)
        try:
            run = await generate_slips_for_range(
                app.state.order_service,
                kind,  # type: ignore[arg-type]
                from_date=body.from_date,
                to_date=body.to_date,
                order_type=body.order_type,
                routes=body.routes,
                order_ids=body.order_ids,
                download_only=body.download_only,
            )
        except SlipError as e:
            logger.info("server.slips.nothing_to_export", kind=kind, reason=e.message)
            raise HTTPException(status_code=422, detail=e.message) from e
        except OrderServiceError as e:
            logger.warning("server.slips.order_service_error", kind=kind, error=e.message)
            raise HTTPException(status_code=502, detail="Order service unavailable") from e
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        finally:
            clear_context()
        return slip_run_to_preview(run)

    @app.post("/units/parse")
    async def parse_product_unit(body: ParseUnitRequest) -> dict[str, Any]:
        """Parse a product name's pack size; with quantity, also base units and crates."""
        parsed = parse_unit(body.product_name)
        out: dict[str, Any] = parsed.model_dump()
        if body.quantity is not None:
            if body.quantity < 0:
                raise HTTPException(status_code=400, detail="quantity must be >= 0")
            base = to_base_units(parsed, body.quantity)
            out["base_unit_quantity"] = base
            out["crates"] = to_crates(base)
        return out

    return app

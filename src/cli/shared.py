"""Shared CLI helpers: console, logger, order service selection, grid and summary printing."""

from pathlib import Path

from rich.console import Console
from rich.table import Table

from src.models.slips import CellGrid, SlipRun
from src.order_service import HttpOrderService, MockOrderService, OrderService
from src.utils.logger import get_logger

console = Console()
logger = get_logger("dispatch_slips.cli")


def get_order_service(mock_path: Path | None = None) -> OrderService:
    """Mock service backed by a JSON file when mock_path is set, else the HTTP order API."""
    if mock_path is not None:
        return MockOrderService(path=mock_path)
    return HttpOrderService()


async def close_order_service(service: OrderService) -> None:
    if isinstance(service, HttpOrderService):
        await service.aclose()


def print_grid(grid: CellGrid, title: str) -> None:
    """Print a slip grid as a rich table (first row is the title, widest row sets the columns)."""
    width = max((len(r) for r in grid), default=0)
    table = Table(title=title, show_header=False, show_lines=False)
    for _ in range(width):
        table.add_column()
    for row in grid[1:]:
        cells = [str(c) for c in row] + [""] * (width - len(row))
        table.add_row(*cells)
    console.print(table)


def print_run_summary(run: SlipRun) -> None:
    console.print(f"\n[bold]{run.kind.capitalize()} slips[/bold]")
    for slip in run.slips:
        where = slip.saved_path or "(preview only)"
        console.print(f"  Route {slip.route_name}: {len(slip.order_ids)} orders -> {where}")
    if run.empty_routes:
        console.print(f"[yellow]  Routes with nothing to load: {', '.join(run.empty_routes)}[/yellow]")
    if run.failed_order_ids:
        ids = ", ".join(str(i) for i in run.failed_order_ids)
        console.print(f"[yellow]  Orders skipped (line items unavailable): {ids}[/yellow]")
    status = run.status
    colour = "green" if status.failed == 0 else "yellow"
    console.print(
        f"[{colour}]  Status updated for {status.succeeded} orders, {status.failed} failed.[/{colour}]"
    )

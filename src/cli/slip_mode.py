"""Slip modes: generate loading or delivery slips for a date range."""

import asyncio
from pathlib import Path
from typing import Optional

import typer

from src.config import OUTPUT_DIR
from src.models.slips import SlipKind, SlipRun
from src.order_service import OrderServiceError
from src.slips.errors import SlipError
from src.slips.render import with_vertical_customer_headers
from src.slips.service import REPORT_TITLES, generate_slips_for_range
from src.utils.logger import bind_context, clear_context

from .shared import close_order_service, console, get_order_service, logger, print_grid, print_run_summary


async def _generate(
    kind: SlipKind,
    mock: Path | None,
    **kwargs,
) -> SlipRun:
    service = get_order_service(mock)
    try:
        return await generate_slips_for_range(service, kind, **kwargs)
    finally:
        await close_order_service(service)


def _run(
    kind: SlipKind,
    from_date: Optional[str],
    to_date: Optional[str],
    order_type: str,
    routes: Optional[list[str]],
    orders: Optional[list[str]],
    mock: Optional[Path],
    output_dir: Path,
    preview: bool,
) -> None:
    log = logger.bind(command=f"{kind}-slip", from_date=from_date, to_date=to_date, mock=str(mock) if mock else None)
    log.info("slips.start")
    bind_context(command=f"{kind}-slip")
    try:
        run = asyncio.run(
            _generate(
                kind,
                mock,
                from_date=from_date,
                to_date=to_date,
                order_type=order_type,
                routes=routes or [],
                order_ids=orders or [],
                download_only=not preview,
                output_dir=output_dir,
            )
        )
    except SlipError as e:
        console.print(f"[red]{e.message}[/red]")
        log.info("slips.nothing_to_export", reason=e.message)
        raise typer.Exit(1)
    except OrderServiceError as e:
        console.print(f"[red]Could not reach the order service: {e.message}[/red]")
        log.error("slips.order_service_error", error=e.message, status=e.status_code)
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    finally:
        clear_context()

    if preview:
        for slip in run.slips:
            grid = slip.workbook.grid
            if kind == "delivery":
                grid = with_vertical_customer_headers(grid)
            print_grid(grid, f"{REPORT_TITLES[kind]} - Route {slip.route_name}")
    print_run_summary(run)
    log.info("slips.complete", routes=len(run.slips), status_failed=run.status.failed)


def loading_slip(
    from_date: Optional[str] = typer.Option(None, "--from", help="From date (YYYY-MM-DD)"),
    to_date: Optional[str] = typer.Option(None, "--to", help="To date (YYYY-MM-DD)"),
    order_type: str = typer.Option("All", "--order-type", "-t", help="All | AM | PM + Evening"),
    route: Optional[list[str]] = typer.Option(None, "--route", "-r", help="Only these routes (repeatable)"),
    order: Optional[list[str]] = typer.Option(None, "--order", help="Only these order ids (repeatable)"),
    mock: Optional[Path] = typer.Option(None, "--mock", "-m", help="Read orders from a JSON file instead of the API"),
    output_dir: Path = typer.Option(OUTPUT_DIR, "--output", "-o", help="Directory for .xlsx files"),
    preview: bool = typer.Option(False, "--preview", "-p", help="Print slips instead of saving them"),
) -> None:
    """Generate per-route loading slips (product totals, crates, brand totals)."""
    _run("loading", from_date, to_date, order_type, route, order, mock, output_dir, preview)


def delivery_slip(
    from_date: Optional[str] = typer.Option(None, "--from", help="From date (YYYY-MM-DD)"),
    to_date: Optional[str] = typer.Option(None, "--to", help="To date (YYYY-MM-DD)"),
    order_type: str = typer.Option("All", "--order-type", "-t", help="All | AM | PM + Evening"),
    route: Optional[list[str]] = typer.Option(None, "--route", "-r", help="Only these routes (repeatable)"),
    order: Optional[list[str]] = typer.Option(None, "--order", help="Only these order ids (repeatable)"),
    mock: Optional[Path] = typer.Option(None, "--mock", "-m", help="Read orders from a JSON file instead of the API"),
    output_dir: Path = typer.Option(OUTPUT_DIR, "--output", "-o", help="Directory for .xlsx files"),
    preview: bool = typer.Option(False, "--preview", "-p", help="Print slips instead of saving them"),
) -> None:
    """Generate per-route delivery slips (one column per customer)."""
    _run("delivery", from_date, to_date, order_type, route, order, mock, output_dir, preview)

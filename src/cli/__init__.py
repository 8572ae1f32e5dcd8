"""CLI commands: one module per mode (slips, parse-unit, serve)."""

from typer import Typer

from src.cli import parse_unit_mode, serve_mode, slip_mode
from src.utils.tracing import init_tracing

init_tracing()

app = Typer(help="Loading and delivery slip generator for route-based distribution")


def register_commands() -> None:
    """Register all CLI commands on the global app."""
    app.command(name="loading-slip")(slip_mode.loading_slip)
    app.command(name="delivery-slip")(slip_mode.delivery_slip)
    app.command(name="parse-unit")(parse_unit_mode.parse_unit_command)
    app.command()(serve_mode.serve)


register_commands()

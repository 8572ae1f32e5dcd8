"""Parse-unit mode: show how a product name is read (pack size, base units, crates)."""

from typing import Optional

import typer

from src.slips.units import CRATE_SIZE, parse_unit, to_base_units, to_crates

from .shared import console


def parse_unit_command(
    product_name: str = typer.Argument(..., help="Product name, e.g. 'Nandini Milk 500 ML'"),
    quantity: Optional[int] = typer.Option(None, "--quantity", "-q", min=0, help="Packs ordered"),
) -> None:
    """Print the parsed pack size; with --quantity also base units and crates."""
    parsed = parse_unit(product_name)
    console.print(f"[bold]{product_name}[/bold]: {parsed.value:g} {parsed.unit}")
    if quantity is not None:
        base = to_base_units(parsed, quantity)
        console.print(f"  {quantity} packs = {base:.2f} base units = {to_crates(base)} crates of {CRATE_SIZE}")

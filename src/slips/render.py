"""Lay consolidated slip data out as a 2-D cell grid (rows of str / int / float).

Pure functions: no I/O. The workbook writer turns a grid into XLSX bytes.
"""

from collections.abc import Mapping, Sequence

from src.models.slips import BrandTotal, CellGrid, ConsolidatedProduct, DeliverySlipData
from src.slips.errors import NothingToExportError

LOADING_SLIP_HEADER = [
    "Products",
    "Quantity in base units (eaches)",
    "Quantity in base units (kgs/lts)",
    "Crates",
]
BRAND_HEADER = ["Brand", "Total Crates"]

# Row index of the customer header on a delivery slip grid.
DELIVERY_HEADER_ROW = 3


def _two_dp(value: float) -> str:
    return f"{value:.2f}"


def render_loading_slip(
    products: Mapping[str, ConsolidatedProduct] | Sequence[ConsolidatedProduct],
    brand_totals: Sequence[BrandTotal],
    route_name: str,
    report_title: str = "Loading Slip",
) -> CellGrid:
    """Product table with totals, followed by the brand-wise crate table."""
    product_list = list(products.values()) if isinstance(products, Mapping) else list(products)
    if not product_list:
        raise NothingToExportError(f"No products to include in the {report_title.lower()} for route {route_name}.")

    grid: CellGrid = [
        [f"{report_title} - Route {route_name}"],
        [],
        list(LOADING_SLIP_HEADER),
    ]
    total_quantity = 0
    total_base = 0.0
    total_crates = 0
    for p in product_list:
        grid.append([p.name, p.total_quantity, _two_dp(p.total_base_unit_quantity), p.total_crates])
        total_quantity += p.total_quantity
        total_base += p.total_base_unit_quantity
        total_crates += p.total_crates
    grid.append(["Totals", total_quantity, _two_dp(total_base), total_crates])
    grid.append([])
    grid.append(list(BRAND_HEADER))
    grid.extend([b.brand, b.total_crates] for b in brand_totals)
    return grid


def render_delivery_slip(
    data: DeliverySlipData,
    route_name: str | None = None,
    report_title: str = "Delivery Slip",
) -> CellGrid:
    """Customer-per-column matrix: quantity per product per customer, crate totals per row."""
    route_name = route_name or data.route_name
    if not data.product_names or not data.customers:
        raise NothingToExportError(f"No delivery slip data available for route {route_name}.")

    customers = data.customers
    grid: CellGrid = [
        [report_title],
        [f"Route: {route_name}"],
        [],
        ["Items", *(c.customer_name for c in customers), "Total Crates"],
    ]
    grand_crates = 0
    for name in data.product_names:
        row_crates = sum(c.crates.get(name, 0) for c in customers)
        grid.append([name, *(c.quantities.get(name, 0) for c in customers), row_crates])
        grand_crates += row_crates
    grid.append(["Totals", *(sum(c.quantities.values()) for c in customers), grand_crates])
    grid.append(["Customer ID", *(c.customer_id for c in customers), ""])
    return grid


def format_vertical_header(text: str) -> str:
    """Stack a header's letters one per line, with a spacer line between words."""
    return "\n \n".join("\n".join(word) for word in text.split(" "))


def with_vertical_customer_headers(grid: CellGrid, header_row: int = DELIVERY_HEADER_ROW) -> CellGrid:
    """Copy of a delivery grid with customer names in the header row stacked vertically."""
    out = [list(row) for row in grid]
    if header_row >= len(out) or len(out[header_row]) < 3:
        return out
    header = out[header_row]
    header[1:-1] = [format_vertical_header(str(name)) for name in header[1:-1]]
    return out

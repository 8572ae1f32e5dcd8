"""Slip consolidation engine: unit parsing, route grouping, consolidation, rendering, workbook export."""

from src.slips.brands import aggregate_brands, brand_key
from src.slips.consolidation import collect_customer_lines, consolidate, fold_line_item
from src.slips.errors import CategoryConflictError, NothingToExportError, SlipError
from src.slips.render import (
    format_vertical_header,
    render_delivery_slip,
    render_loading_slip,
    with_vertical_customer_headers,
)
from src.slips.routing import (
    UNROUTED,
    filter_eligible_orders,
    filter_orders_by_routes,
    group_orders_by_route,
    select_orders,
)
from src.slips.units import (
    CRATE_SIZE,
    CatalogUnitExtractor,
    RegexUnitExtractor,
    UnitExtractor,
    parse_unit,
    to_base_units,
    to_crates,
)
from src.slips.workbook import build_slip_workbook, slip_filename, write_workbook

__all__ = [
    "aggregate_brands",
    "brand_key",
    "collect_customer_lines",
    "consolidate",
    "fold_line_item",
    "CategoryConflictError",
    "NothingToExportError",
    "SlipError",
    "format_vertical_header",
    "render_delivery_slip",
    "render_loading_slip",
    "with_vertical_customer_headers",
    "UNROUTED",
    "filter_eligible_orders",
    "filter_orders_by_routes",
    "group_orders_by_route",
    "select_orders",
    "CRATE_SIZE",
    "CatalogUnitExtractor",
    "RegexUnitExtractor",
    "UnitExtractor",
    "parse_unit",
    "to_base_units",
    "to_crates",
    "build_slip_workbook",
    "slip_filename",
    "write_workbook",
]

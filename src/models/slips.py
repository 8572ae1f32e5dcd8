"""Models produced by the slip consolidation engine."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

UnitName = Literal["ml", "gm", "ltr", "kg", "unit"]
SlipKind = Literal["loading", "delivery"]
CellValue = str | int | float
CellGrid = list[list[CellValue]]


class ParsedUnit(BaseModel):
    """Packaging measure inferred from a product name (e.g. 500 ml)."""

    value: float
    unit: UnitName


class ConsolidatedProduct(BaseModel):
    """Running totals for one product name within a route bucket."""

    name: str
    total_quantity: int = 0
    category: str = "Unknown"
    total_base_unit_quantity: float = 0.0
    total_crates: int = 0


class ConsolidationResult(BaseModel):
    """Products folded from a route's orders, plus which orders could not be fetched."""

    products: dict[str, ConsolidatedProduct] = {}
    fetched_order_ids: list[int | str] = []
    failed_order_ids: list[int | str] = []


class BrandTotal(BaseModel):
    """Crates per brand (first word of the product name, upper-cased)."""

    brand: str
    total_crates: int


class CustomerLines(BaseModel):
    """One customer's column on a delivery slip."""

    customer_id: int | str
    customer_name: str
    order_ids: list[int | str] = []
    quantities: dict[str, int] = {}
    base_unit_quantities: dict[str, float] = {}
    crates: dict[str, int] = {}


class DeliverySlipData(BaseModel):
    """Customer-by-product matrix for a delivery slip."""

    route_name: str
    customers: list[CustomerLines] = []
    product_names: list[str] = []
    fetched_order_ids: list[int | str] = []
    failed_order_ids: list[int | str] = []


class SlipWorkbook(BaseModel):
    """Serialized spreadsheet plus the grid it was built from."""

    filename: str
    grid: list[list[Any]]
    content: bytes = Field(repr=False)
    base64: str = Field(repr=False)


class StatusUpdateResult(BaseModel):
    """Outcome of marking one order as slip-generated."""

    order_id: int | str
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None


class StatusUpdateSummary(BaseModel):
    """Aggregate of status updates after slip generation."""

    succeeded: int = 0
    failed: int = 0
    results: list[StatusUpdateResult] = []

    def merge(self, other: "StatusUpdateSummary") -> "StatusUpdateSummary":
        return StatusUpdateSummary(
            succeeded=self.succeeded + other.succeeded,
            failed=self.failed + other.failed,
            results=self.results + other.results,
        )


class RouteSlip(BaseModel):
    """Generated slip for one route."""

    route_name: str
    order_ids: list[int | str]
    workbook: SlipWorkbook
    saved_path: Optional[str] = None
    products: list[ConsolidatedProduct] = []
    brand_totals: list[BrandTotal] = []


class SlipRun(BaseModel):
    """Result of one slip-generation request across all route buckets."""

    kind: SlipKind
    slips: list[RouteSlip] = []
    empty_routes: list[str] = []
    failed_order_ids: list[int | str] = []
    status: StatusUpdateSummary = Field(default_factory=StatusUpdateSummary)

"""Pydantic models for orders and generated slips."""

from src.models.orders import Order, OrderLineItem, Route
from src.models.slips import (
    BrandTotal,
    CellGrid,
    ConsolidatedProduct,
    ConsolidationResult,
    CustomerLines,
    DeliverySlipData,
    ParsedUnit,
    RouteSlip,
    SlipKind,
    SlipRun,
    SlipWorkbook,
    StatusUpdateResult,
    StatusUpdateSummary,
)

__all__ = [
    "Order",
    "OrderLineItem",
    "Route",
    "BrandTotal",
    "CellGrid",
    "ConsolidatedProduct",
    "ConsolidationResult",
    "CustomerLines",
    "DeliverySlipData",
    "ParsedUnit",
    "RouteSlip",
    "SlipKind",
    "SlipRun",
    "SlipWorkbook",
    "StatusUpdateResult",
    "StatusUpdateSummary",
]

"""Order service: HTTP client for the order API and a JSON-backed mock."""

from src.order_service.errors import OrderServiceError
from src.order_service.protocol import OrderService, SlipStatusKind
from src.order_service.http_client import HttpOrderService
from src.order_service.mock import MockOrderService

__all__ = [
    "OrderServiceError",
    "OrderService",
    "SlipStatusKind",
    "HttpOrderService",
    "MockOrderService",
]

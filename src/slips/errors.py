"""Errors raised by slip generation. Messages are short and safe to show to users."""


class SlipError(Exception):
    """Base class for slip generation failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NothingToExportError(SlipError):
    """No orders, or no consolidatable products, for the requested slip."""


class CategoryConflictError(SlipError):
    """Same product name seen with different categories under the strict policy."""

    def __init__(self, product_name: str, existing: str, incoming: str):
        super().__init__(
            f"Product {product_name!r} has conflicting categories: {existing!r} vs {incoming!r}"
        )
        self.product_name = product_name
        self.existing = existing
        self.incoming = incoming

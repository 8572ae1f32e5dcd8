"""Order API errors."""


class OrderServiceError(Exception):
    """A call to the order API failed (transport error or non-2xx response)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        order_id: int | str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.order_id = order_id

"""Request bodies for the slip API."""

from datetime import date
from typing import Optional

from pydantic import BaseModel


class SlipRequest(BaseModel):
    """Which orders to build slips for."""

    from_date: Optional[date] = None
    to_date: Optional[date] = None
    order_type: str = "All"  # "All" | "AM" | "PM + Evening"
    routes: list[str] = []
    order_ids: list[int | str] = []
    download_only: bool = False


class ParseUnitRequest(BaseModel):
    """Product name to parse, with an optional ordered quantity."""

    product_name: str
    quantity: Optional[int] = None

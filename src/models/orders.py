"""Order, line item and route models (shapes returned by the order API)."""

from typing import Optional

from pydantic import BaseModel, Field


class Order(BaseModel):
    """Order header from the orders query service. Read-only here."""

    id: int | str
    customer_id: int | str
    customer_name: Optional[str] = None
    order_type: Optional[str] = None  # "AM" | "PM" | "Evening"
    placed_on: Optional[int] = None  # epoch seconds
    total_amount: Optional[float] = None
    cancelled: Optional[str] = None  # "Yes" | "No"
    approve_status: Optional[str] = None  # "Accepted" | "Rejected" | ...
    loading_slip: Optional[str] = None  # "Yes" once a loading slip was generated

    class Config:
        extra = "allow"


class OrderLineItem(BaseModel):
    """One product line of an order (GET /order-products)."""

    product_name: str = Field(alias="name")
    quantity: int = Field(ge=0)
    category: Optional[str] = None
    gst_rate: Optional[float] = None
    price: Optional[float] = None

    class Config:
        populate_by_name = True
        extra = "allow"


class Route(BaseModel):
    """Route master record (GET /routes_crud)."""

    id: int | str
    name: str

    class Config:
        extra = "allow"

# minishop/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Generic, List, Optional, TypeVar
from datetime import datetime

from minishop.data.models.payment import PaymentStatus

T = TypeVar("T")


# ---------------------------------------------------------------- envelope

class PaginationOut(BaseModel):
    total_page: int
    element_per_page: int
    total_elements: int
    current_page_size: int


class ApiResponse(BaseModel, Generic[T]):
    """Envelope returned by every endpoint."""
    status: str = "success"
    data: T
    pagination: Optional[PaginationOut] = None


# ---------------------------------------------------------------- catalog

class ProductCreate(BaseModel):
    """Schema for creating a product."""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    available_quantity: int = Field(..., ge=0, description="Units in stock")
    price: int = Field(..., ge=0, description="Price in whole currency units")
    category_id: str = Field(..., min_length=1, description="Category public id")


class ProductUpdate(BaseModel):
    """Partial product update; omitted fields are left untouched."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    available_quantity: Optional[int] = Field(None, ge=0)
    price: Optional[int] = Field(None, ge=0)
    category_id: Optional[str] = None


class ProductOut(BaseModel):
    public_id: str
    name: str
    description: Optional[str] = None
    price: int
    available_quantity: int
    category_name: Optional[str] = None


# ---------------------------------------------------------------- cart

class AddToCartIn(BaseModel):
    """Schema for adding a product to the caller's cart."""
    product_id: str = Field(..., min_length=1, description="Product public id")
    quantity: int = Field(..., ge=1, description="Units to add (at least 1)")


class CartItemOut(BaseModel):
    id: str
    product_id: str
    product_name: str
    amount: int
    quantity: int


class CartOut(BaseModel):
    id: str
    items: List[CartItemOut]
    sub_total: int


# ---------------------------------------------------------------- orders

class OrderLineOut(BaseModel):
    product_id: str
    product_name: str
    price: int
    quantity: int


class PaymentOut(BaseModel):
    amount: int
    status: PaymentStatus
    reference: str

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    public_id: str
    reference: str
    order_date: datetime
    order_lines: List[OrderLineOut] = []
    payment: Optional[PaymentOut] = None


class CheckoutOut(BaseModel):
    checkout_url: str
    order: OrderOut


# ---------------------------------------------------------------- gateway

class ProductData(BaseModel):
    name: str


class PriceData(BaseModel):
    currency: str
    unit_amount: int = Field(..., ge=0, description="Unit price in minor currency units")
    product_data: ProductData


class LineItem(BaseModel):
    quantity: int
    price_data: PriceData


class CheckoutRequest(BaseModel):
    """Hosted checkout session request sent to the payment gateway."""
    success_url: str
    cancel_url: str
    customer_email: str
    client_reference_id: str
    line_items: List[LineItem]


class CheckoutSession(BaseModel):
    id: str
    url: Optional[str] = None
    payment_status: Optional[str] = None

"""Pydantic schemas for seed documents."""

from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field


class UserSeed(BaseModel):
    username: str
    email: str
    first_name: str
    last_name: str
    phone_number: Optional[str] = None
    status: Optional[str] = None  # "ACTIVE"|"INACTIVE"|"SUSPENDED"|"PENDING"


class ProductSeed(BaseModel):
    name: str
    sku: str
    price: Decimal
    category: str = Field(..., description="ProductCategory name, e.g. 'ELECTRONICS'")
    description: Optional[str] = None
    stock: int = Field(default=0, ge=0)
    active: bool = True


class OrderLineSeed(BaseModel):
    sku: str = Field(..., description="SKU of a product defined in the same document")
    quantity: int = Field(..., gt=0)
    unit_price: Optional[Decimal] = Field(
        None, description="Price override (defaults to the product's current price)"
    )


class OrderSeed(BaseModel):
    customer: str = Field(..., description="Username of a user defined in the same document")
    order_number: Optional[str] = None
    shipping_address: Optional[str] = None
    billing_address: Optional[str] = None
    tax_amount: Decimal = Field(default=Decimal("0"), ge=0)
    shipping_amount: Decimal = Field(default=Decimal("0"), ge=0)
    lines: list[OrderLineSeed] = Field(default_factory=list)
    status: Optional[Literal["confirmed", "shipped", "delivered", "cancelled"]] = None
    reserve_stock: bool = Field(
        default=False, description="Remove ordered quantities from product stock"
    )


class SeedDocument(BaseModel):
    users: list[UserSeed] = Field(default_factory=list)
    products: list[ProductSeed] = Field(default_factory=list)
    orders: list[OrderSeed] = Field(default_factory=list)

"""
Pydantic schemas for the sales source row and the entities derived from it
"""

from pydantic import BaseModel, Field, validator
from datetime import date
from decimal import Decimal
import re

# Source column order; every data row carries exactly these fields
SOURCE_COLUMNS = (
    "order_id",
    "product_id",
    "customer_id",
    "product_name",
    "category",
    "region",
    "date_of_sale",
    "quantity_sold",
    "unit_price",
    "discount",
    "shipping_cost",
    "payment_method",
    "customer_name",
    "customer_email",
    "customer_address",
)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")
DECIMAL_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

# Bounds of the 32-bit INTEGER column holding quantity_sold
QUANTITY_MIN = -2 ** 31
QUANTITY_MAX = 2 ** 31 - 1


class SalesRow(BaseModel):
    """
    One denormalized source row with every field typed.

    Fields are declared in source column order so that the first
    validation error reported is the first failing column.
    """

    order_id: str
    product_id: str
    customer_id: str
    product_name: str
    category: str
    region: str
    date_of_sale: date
    quantity_sold: int
    unit_price: Decimal = Field(..., ge=0)
    discount: Decimal = Field(..., ge=0)
    shipping_cost: Decimal = Field(..., ge=0)
    payment_method: str
    customer_name: str
    customer_email: str
    customer_address: str

    @validator("order_id", "product_id", "customer_id", pre=True)
    def require_key(cls, v):
        """Keys become primary keys and cannot be blank"""
        if not isinstance(v, str) or not v.strip():
            raise ValueError("must not be blank")
        return v

    @validator("date_of_sale", pre=True)
    def parse_date(cls, v):
        """Accept exactly YYYY-MM-DD"""
        if not isinstance(v, str) or not DATE_PATTERN.match(v):
            raise ValueError(f"{v!r} does not match YYYY-MM-DD")
        return date.fromisoformat(v)

    @validator("quantity_sold", pre=True)
    def parse_quantity(cls, v):
        if not isinstance(v, str) or not INTEGER_PATTERN.match(v):
            raise ValueError(f"{v!r} is not an integer")
        quantity = int(v)
        if not QUANTITY_MIN <= quantity <= QUANTITY_MAX:
            raise ValueError(f"{v!r} is out of range")
        return quantity

    @validator("unit_price", "discount", "shipping_cost", pre=True)
    def parse_amount(cls, v):
        if not isinstance(v, str) or not DECIMAL_PATTERN.match(v):
            raise ValueError(f"{v!r} is not a decimal number")
        return Decimal(v)

    def to_bundle(self, row: int) -> "EntityBundle":
        """Split the row into its four entities"""
        return EntityBundle(
            row=row,
            customer=CustomerCreate(
                customer_id=self.customer_id,
                customer_name=self.customer_name,
                email=self.customer_email,
                address=self.customer_address,
                region=self.region,
            ),
            product=ProductCreate(
                product_id=self.product_id,
                product_name=self.product_name,
                category=self.category,
                unit_price=self.unit_price,
            ),
            order=OrderCreate(
                order_id=self.order_id,
                customer_id=self.customer_id,
                order_date=self.date_of_sale,
                payment_method=self.payment_method,
                shipping_cost=self.shipping_cost,
                discount=self.discount,
            ),
            order_item=OrderItemCreate(
                order_id=self.order_id,
                product_id=self.product_id,
                quantity_sold=self.quantity_sold,
                unit_price_at_sale=self.unit_price,
                discount_applied=self.discount,
            ),
        )


class CustomerCreate(BaseModel):
    customer_id: str
    customer_name: str
    email: str
    address: str
    region: str


class ProductCreate(BaseModel):
    product_id: str
    product_name: str
    category: str
    unit_price: Decimal


class OrderCreate(BaseModel):
    order_id: str
    customer_id: str
    order_date: date
    payment_method: str
    shipping_cost: Decimal
    discount: Decimal


class OrderItemCreate(BaseModel):
    order_id: str
    product_id: str
    quantity_sold: int
    unit_price_at_sale: Decimal
    discount_applied: Decimal


class EntityBundle(BaseModel):
    """The four typed records derived from one source row"""
    row: int
    customer: CustomerCreate
    product: ProductCreate
    order: OrderCreate
    order_item: OrderItemCreate

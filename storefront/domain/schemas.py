# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import List, Literal
from decimal import Decimal
from datetime import datetime

from storefront.domain.statuses import OrderStatus, ReservationStatus


CheckoutMode = Literal["reservation", "delivery"]


def _required_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Pole jest wymagane")
    return value


# ---------------------------------------------------------------- koszyk

class CartItem(BaseModel):
    """Pozycja koszyka; nazwa, cena i obrazek skopiowane w chwili dodania."""

    id: str
    product_id: int
    product_name: str
    product_price: Decimal
    product_image: str | None = None
    quantity: int = Field(..., ge=1)


class CartItemIn(BaseModel):
    product_id: int = Field(..., gt=0, description="ID produktu (musi być > 0)")


class CartQuantityIn(BaseModel):
    # <= 0 usuwa pozycje
    quantity: int


class CartOut(BaseModel):
    session: str
    items: List[CartItem]
    item_count: int
    total_amount: Decimal


# ---------------------------------------------------------------- checkout

class ReservationForm(BaseModel):
    name: str
    email: str
    phone: str

    @field_validator("name", "email", "phone")
    @classmethod
    def check_contact(cls, value: str) -> str:
        return _required_text(value)


class DeliveryForm(ReservationForm):
    address: str
    notes: str | None = None

    @field_validator("address")
    @classmethod
    def check_address(cls, value: str) -> str:
        return _required_text(value)

    @field_validator("notes")
    @classmethod
    def blank_notes_to_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()


class SubmissionItem(BaseModel):
    product_id: int
    product_name: str
    quantity: int
    price: Decimal


class SubmissionOut(BaseModel):
    id: int
    kind: CheckoutMode
    total_amount: Decimal
    order_number: str | None = None


class ContactPrefill(BaseModel):
    name: str = ""
    email: str = ""


class CheckoutSummaryOut(BaseModel):
    mode: CheckoutMode
    items: List[CartItem]
    subtotal: Decimal
    delivery_fee: Decimal
    total_amount: Decimal
    contact: ContactPrefill


# ---------------------------------------------------------------- zamowienia / rezerwacje

class OrderOut(BaseModel):
    id: int
    order_number: str | None
    user_id: int | None
    user_name: str
    user_email: str
    user_phone: str
    delivery_address: str
    notes: str | None
    items: List[SubmissionItem]
    total_amount: Decimal
    status: OrderStatus
    payment_status: str
    payment_method: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReservationOut(BaseModel):
    id: int
    user_id: int | None
    user_name: str
    user_email: str
    user_phone: str
    items: List[SubmissionItem]
    total_amount: Decimal
    status: ReservationStatus
    created_at: datetime
    expires_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MyOrdersOut(BaseModel):
    orders: List[OrderOut]
    reservations: List[ReservationOut]


class StatusUpdateIn(BaseModel):
    status: str


class CountdownOut(BaseModel):
    reservation_id: int
    expires_at: datetime
    state: Literal["ACTIVE", "EXPIRED"]
    hours: int
    minutes: int
    seconds: int
    total_ms: int
    is_urgent: bool
    is_very_urgent: bool


# ---------------------------------------------------------------- katalog

class CategoryIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: str | None = None
    icon: str = "Package"
    color: str = "from-cyan-500 to-blue-600"
    bg_color: str = "bg-cyan-50"


class CategoryOut(CategoryIn):
    id: int
    items_count: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProductIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    price: Decimal = Field(..., ge=0)
    image_url: str | None = None
    category_id: int | None = None
    rating: float = Field(0, ge=0, le=5)
    reviews_count: int = Field(0, ge=0)
    badge: str | None = None
    discount: str | None = None
    in_stock: bool = True


class ProductOut(ProductIn):
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DeliveryFeeIn(BaseModel):
    delivery_fee: Decimal = Field(..., ge=0)


class DeliveryFeeOut(BaseModel):
    delivery_fee: Decimal


class StatsOut(BaseModel):
    total_products: int
    total_categories: int
    in_stock_products: int
    out_of_stock_products: int


# ---------------------------------------------------------------- auth

class SignUpIn(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6)
    full_name: str = ""


class SignInIn(BaseModel):
    email: str
    password: str


class UserRead(BaseModel):
    id: int
    email: str
    full_name: str
    is_admin: bool

    model_config = ConfigDict(from_attributes=True)


class SessionOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserRead

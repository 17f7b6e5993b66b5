"""Pydantic models for the shipment API."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from lenco_shipping.config.constants import EMAIL_VALID_PATTERN
from lenco_shipping.models.mercury import BookCollectionRequest, FreightShipment, GetFreightRequest


def _check_email(value: str) -> str:
    value = value.strip()
    if not EMAIL_VALID_PATTERN.match(value):
        raise ValueError("must be a valid email address")
    return value


class ApiModel(BaseModel):
    """camelCase JSON on the wire, snake_case attributes in Python."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        coerce_numbers_to_str = True


class ShippingAddress(ApiModel):
    address: str = Field(..., min_length=1)
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None


class CreateShipmentRequest(ApiModel):
    """Body of POST /shipments/callback."""

    order_id: str = Field(..., min_length=1)
    user_email: str
    mercury_data: BookCollectionRequest

    @field_validator("user_email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _check_email(value)


class CreateDeliveryRequest(ApiModel):
    """Body of POST /shipments/delivery-request."""

    order_id: str = Field(..., min_length=1)
    customer_email: str
    customer_name: Optional[str] = None
    transaction_reference: Optional[str] = None
    amount: Optional[str] = None
    shipping_address: ShippingAddress
    mercury_data: Optional[BookCollectionRequest] = None

    @field_validator("customer_email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _check_email(value)


class ShipmentResponse(ApiModel):
    id: str
    order_id: str
    user_email: str
    waybill: Optional[str] = None
    rate: Optional[float] = None
    status: str
    created_at: datetime
    updated_at: datetime


class DeliveryRequestResponse(ApiModel):
    id: str
    order_id: str
    customer_email: str
    waybill: Optional[str] = None
    rate: Optional[float] = None
    status: str
    created_at: datetime
    updated_at: datetime
    emails_sent: bool


class QuotationQuery(BaseModel):
    """Flat query parameters of GET /shipments/quotation (one shipment)."""

    domestic_service: int
    international_service: int
    vendor_id: str
    source_country: str
    source_city: str
    destination_country: str
    destination_city: str
    insurance: int = 0
    pieces: int = 1
    length: float
    width: float
    height: float
    gross_weight: float
    declared_value: float
    email: Optional[str] = None
    private_key: Optional[str] = None

    def to_request(self) -> GetFreightRequest:
        """Build the Mercury quotation body."""
        shipment = FreightShipment(
            vendor_id=self.vendor_id,
            source_country=self.source_country,
            source_city=self.source_city,
            destination_country=self.destination_country,
            destination_city=self.destination_city,
            insurance=self.insurance,
            pieces=self.pieces,
            length=self.length,
            width=self.width,
            height=self.height,
            gross_weight=self.gross_weight,
            declared_value=self.declared_value,
        )
        return GetFreightRequest(
            email=self.email,
            private_key=self.private_key,
            domestic_service=self.domestic_service,
            international_service=self.international_service,
            shipment=[shipment],
        )

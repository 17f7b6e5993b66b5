"""Pydantic models for the Mercury shipping API (snake_case wire format)."""

from typing import List, Optional

from pydantic import BaseModel, Field


class PickupAddress(BaseModel):
    """Sender address (s_* fields)."""

    s_first_name: str
    s_last_name: str
    s_country: str
    s_statelist: str
    s_city: str
    s_add_1: str
    s_add_2: Optional[str] = ""
    s_mobile_no: str
    s_email: str


class DeliveryAddress(BaseModel):
    """Receiver address (r_* fields)."""

    r_first_name: str
    r_last_name: str
    r_country: str
    r_statelist: str
    r_city: str
    r_add_1: str
    r_add_2: Optional[str] = ""
    r_mobile_no: str
    r_email: str


class ItemDetails(BaseModel):
    pieces: int
    length: float
    width: float
    height: float
    gross_weight: float
    declared_value: float


class ShipmentDetails(BaseModel):
    paymenttype: int


class BookingShipment(BaseModel):
    """One shipment inside a booking request."""

    shipment_pickup_address: List[PickupAddress]
    shipment_delivery_address: List[DeliveryAddress]
    shipment_details: List[ShipmentDetails]
    item_details: List[ItemDetails]


class BookCollectionRequest(BaseModel):
    """Body for POST /bookcollection.

    email/private_key may be omitted; the client fills in the configured
    Mercury credentials.
    """

    email: Optional[str] = None
    private_key: Optional[str] = None
    domestic_service: int
    international_service: int
    insurance: int
    shipment: List[BookingShipment] = Field(..., min_length=1)


class BookCollectionResponse(BaseModel):
    error_code: int
    error_msg: Optional[str] = None
    rate: Optional[float] = None
    waybills: Optional[List[str]] = Field(default_factory=list, alias="waybill")

    class Config:
        populate_by_name = True
        extra = "allow"


class FreightShipment(BaseModel):
    vendor_id: str
    source_country: str
    source_city: str
    destination_country: str
    destination_city: str
    insurance: int
    pieces: int
    length: float
    width: float
    height: float
    gross_weight: float
    declared_value: float


class GetFreightRequest(BaseModel):
    """Body for the freight quotation endpoint."""

    email: Optional[str] = None
    private_key: Optional[str] = None
    domestic_service: int
    international_service: int
    shipment: List[FreightShipment] = Field(..., min_length=1)


class GetFreightResponse(BaseModel):
    error_code: int
    error_msg: Optional[str] = None
    rate: Optional[float] = None

    class Config:
        extra = "allow"


class TrackingDetail(BaseModel):
    status_timestamp: Optional[str] = None
    location: Optional[str] = None
    status_comment: Optional[str] = None

    class Config:
        extra = "allow"


class TrackingOtherDetail(BaseModel):
    """Proof-of-delivery metadata."""

    receiver_name: Optional[str] = None
    pod: Optional[str] = None

    class Config:
        extra = "allow"


class TrackShipmentResponse(BaseModel):
    error_code: int
    error_msg: Optional[str] = None
    detail: Optional[List[TrackingDetail]] = Field(default_factory=list)
    other_detail: Optional[TrackingOtherDetail] = None

    class Config:
        extra = "allow"

"""Pydantic models for webhooks, Mercury, shipments and notifications."""

from lenco_shipping.models.mercury import (
    BookCollectionRequest,
    BookCollectionResponse,
    GetFreightRequest,
    GetFreightResponse,
    TrackShipmentResponse,
)
from lenco_shipping.models.notification import NotificationPayload, NotificationResult, PayerBank, PayerDetails
from lenco_shipping.models.shipment import (
    CreateDeliveryRequest,
    CreateShipmentRequest,
    DeliveryRequestResponse,
    QuotationQuery,
    ShipmentResponse,
    ShippingAddress,
)
from lenco_shipping.models.webhook import LencoEvent, LencoWebhookEnvelope

__all__ = [
    "BookCollectionRequest",
    "BookCollectionResponse",
    "GetFreightRequest",
    "GetFreightResponse",
    "TrackShipmentResponse",
    "NotificationPayload",
    "NotificationResult",
    "PayerBank",
    "PayerDetails",
    "CreateDeliveryRequest",
    "CreateShipmentRequest",
    "DeliveryRequestResponse",
    "QuotationQuery",
    "ShipmentResponse",
    "ShippingAddress",
    "LencoEvent",
    "LencoWebhookEnvelope",
]

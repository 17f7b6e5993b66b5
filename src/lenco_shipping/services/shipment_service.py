"""Shipment service: booking with Mercury, persisting and notifying."""

from decimal import Decimal
from typing import Optional, Tuple

from lenco_shipping.config.constants import SHIPMENT_STATUS_BOOKED, SHIPMENT_STATUS_PENDING
from lenco_shipping.core.logger import setup_logger
from lenco_shipping.db.models import Shipment
from lenco_shipping.db.repository import ShipmentRepository
from lenco_shipping.integrations.mail import MailService
from lenco_shipping.integrations.mercury import MercuryClient
from lenco_shipping.models.mercury import BookCollectionRequest, GetFreightRequest, GetFreightResponse
from lenco_shipping.models.notification import NotificationPayload
from lenco_shipping.models.shipment import (
    CreateDeliveryRequest,
    CreateShipmentRequest,
    DeliveryRequestResponse,
    ShipmentResponse,
    ShippingAddress,
)

logger = setup_logger(__name__)


def format_shipping_address(address: ShippingAddress) -> str:
    """Address line followed by city, state, postal code and country when present."""
    parts = [
        address.address,
        address.city,
        address.state,
        address.postal_code,
        address.country,
    ]
    return ", ".join(part for part in parts if part)


def _rate_to_float(rate: Optional[Decimal]) -> Optional[float]:
    return float(rate) if rate is not None else None


def to_shipment_response(shipment: Shipment) -> ShipmentResponse:
    return ShipmentResponse(
        id=shipment.id,
        order_id=shipment.order_id,
        user_email=shipment.user_email,
        waybill=shipment.waybill,
        rate=_rate_to_float(shipment.rate),
        status=shipment.status,
        created_at=shipment.created_at,
        updated_at=shipment.updated_at,
    )


class ShipmentService:
    """Coordinates Mercury bookings, the shipment table and notification emails."""

    def __init__(
        self,
        repository: ShipmentRepository,
        mercury_client: MercuryClient,
        mail_service: MailService,
    ):
        """Initialize service with its collaborators."""
        self.repository = repository
        self.mercury_client = mercury_client
        self.mail_service = mail_service

    async def _book(self, request: BookCollectionRequest) -> Tuple[Optional[str], Optional[Decimal]]:
        """
        Book a collection and return (first waybill, rate).

        Mercury errors propagate so that nothing is persisted.
        """
        response = await self.mercury_client.book_collection(request)
        # Mercury may answer [""]; an empty waybill is stored as NULL
        waybill = (response.waybills[0] or None) if response.waybills else None
        rate = Decimal(str(response.rate)) if response.rate is not None else None
        logger.info(f"Mercury booking complete: waybill={waybill} rate={rate}")
        return waybill, rate

    async def create_delivery_request(self, request: CreateDeliveryRequest) -> DeliveryRequestResponse:
        """
        Book (when Mercury data is supplied), persist and email customer and staff.

        Email failures are reported through emails_sent and never undo the
        stored shipment.
        """
        logger.info(f"Creating delivery request for order {request.order_id}")

        waybill: Optional[str] = None
        rate: Optional[Decimal] = None
        if request.mercury_data:
            waybill, rate = await self._book(request.mercury_data)
        else:
            logger.info(f"No Mercury data for order {request.order_id} - skipping booking")

        status = SHIPMENT_STATUS_BOOKED if waybill else SHIPMENT_STATUS_PENDING
        shipment = await self.repository.create(
            order_id=request.order_id,
            user_email=request.customer_email,
            status=status,
            waybill=waybill,
            rate=rate,
        )
        logger.info(f"Shipment {shipment.id} stored for order {request.order_id} ({status})")

        details = NotificationPayload(
            transaction_reference=request.transaction_reference,
            amount=request.amount,
            narration=f"Order {request.order_id}",
            shipping_address=format_shipping_address(request.shipping_address),
            waybill=waybill,
            status=status,
        )
        result = await self.mail_service.notify(request.customer_email, details)
        if not result.ok:
            logger.error(f"Emails failed for order {request.order_id}: {'; '.join(result.errors)}")

        return DeliveryRequestResponse(
            id=shipment.id,
            order_id=shipment.order_id,
            customer_email=shipment.user_email,
            waybill=shipment.waybill,
            rate=_rate_to_float(shipment.rate),
            status=shipment.status,
            created_at=shipment.created_at,
            updated_at=shipment.updated_at,
            emails_sent=result.ok,
        )

    async def create_shipment(self, request: CreateShipmentRequest) -> ShipmentResponse:
        """Book with Mercury and persist the result. No emails are sent."""
        logger.info(f"Creating shipment for order {request.order_id}")

        waybill, rate = await self._book(request.mercury_data)
        shipment = await self.repository.create(
            order_id=request.order_id,
            user_email=request.user_email,
            status=SHIPMENT_STATUS_BOOKED if waybill else SHIPMENT_STATUS_PENDING,
            waybill=waybill,
            rate=rate,
        )
        return to_shipment_response(shipment)

    async def get_shipment_by_waybill(self, waybill: str) -> Optional[ShipmentResponse]:
        shipment = await self.repository.get_by_waybill(waybill)
        if shipment is None:
            return None
        return to_shipment_response(shipment)

    async def get_quotation(self, request: GetFreightRequest) -> GetFreightResponse:
        return await self.mercury_client.get_freight_quotation(request)

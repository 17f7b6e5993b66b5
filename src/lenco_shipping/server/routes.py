"""API routes: Lenco webhook, shipments, tracking and health."""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from lenco_shipping.config.constants import LENCO_SIGNATURE_HEADER
from lenco_shipping.config.settings import Settings
from lenco_shipping.core.errors import ShipmentNotFoundError
from lenco_shipping.core.logger import setup_logger
from lenco_shipping.db.repository import ShipmentRepository
from lenco_shipping.handlers.webhook import LencoWebhookHandler, receive_webhook
from lenco_shipping.integrations.mail import MailService
from lenco_shipping.integrations.mercury import MercuryClient
from lenco_shipping.models.mercury import GetFreightResponse, TrackShipmentResponse
from lenco_shipping.models.shipment import (
    CreateDeliveryRequest,
    CreateShipmentRequest,
    DeliveryRequestResponse,
    QuotationQuery,
    ShipmentResponse,
)
from lenco_shipping.services.shipment_service import ShipmentService

logger = setup_logger(__name__)
router = APIRouter()

WEBHOOK_STATUS_MESSAGES = {
    status.HTTP_202_ACCEPTED: "accepted",
    status.HTTP_400_BAD_REQUEST: "Invalid webhook payload",
    status.HTTP_401_UNAUTHORIZED: "Invalid or missing signature",
}


# Stubs overridden by create_app()
async def get_settings_stub() -> Settings:
    raise RuntimeError("Settings dependency not configured")


async def get_db_session_stub() -> AsyncSession:
    raise RuntimeError("Database not initialized")


async def get_mercury_client_stub() -> MercuryClient:
    raise RuntimeError("Mercury client not initialized")


async def get_mail_service_stub() -> MailService:
    raise RuntimeError("Mail service not initialized")


async def get_shipment_service(
    session: AsyncSession = Depends(get_db_session_stub),
    mercury_client: MercuryClient = Depends(get_mercury_client_stub),
    mail_service: MailService = Depends(get_mail_service_stub),
) -> ShipmentService:
    """Request-scoped ShipmentService bound to the request's DB session."""
    return ShipmentService(ShipmentRepository(session), mercury_client, mail_service)


async def get_webhook_handler(
    mail_service: MailService = Depends(get_mail_service_stub),
) -> LencoWebhookHandler:
    return LencoWebhookHandler(mail_service)


@router.get("/")
async def root() -> dict:
    """Root endpoint with basic service info."""
    return {
        "service": "Lenco Shipping Service",
        "version": "1.0.0",
        "endpoints": {
            "webhook": "POST /webhooks/lenco",
            "create_shipment": "POST /shipments/callback",
            "delivery_request": "POST /shipments/delivery-request",
            "quotation": "GET /shipments/quotation",
            "tracking": "GET /tracking/{waybill}",
            "tracking_status": "GET /tracking/status/{waybill}",
            "health": "GET /health",
            "docs": "GET /docs",
        },
    }


@router.get("/health")
async def health_check(app_settings: Settings = Depends(get_settings_stub)) -> dict:
    """Configuration health for monitoring. Never reveals secret values."""
    env_checks = {
        "lenco_webhook_hash_key": "ok" if app_settings.lenco_webhook_hash_key else "missing",
        "resend_api_key": "ok" if app_settings.resend_api_key else "missing",
        "staff_emails": "ok" if app_settings.staff_email_list else "missing",
        "mercury_email": "ok" if app_settings.mercury_email else "missing",
        "mercury_private_key": "ok" if app_settings.mercury_private_key else "missing",
    }

    return {
        "status": "degraded" if "missing" in env_checks.values() else "healthy",
        "service": "lenco-shipping",
        "checks": {
            "environment": env_checks,
            "monitoring": "enabled" if app_settings.glitchtip_dsn else "disabled",
            "event_log": "enabled" if app_settings.webhook_event_log_dir else "disabled",
        },
    }


@router.get("/admin/test")
async def admin_test() -> dict:
    """Liveness check."""
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.post("/webhooks/lenco")
async def lenco_webhook(
    request: Request,
    x_lenco_signature: Optional[str] = Header(None, alias=LENCO_SIGNATURE_HEADER),
    handler: LencoWebhookHandler = Depends(get_webhook_handler),
    app_settings: Settings = Depends(get_settings_stub),
) -> JSONResponse:
    """
    Lenco webhook endpoint.

    The signature is checked against the raw bytes, so the body is read
    before any JSON parsing. Processing errors still answer 202.
    """
    raw_body = await request.body()

    status_code = await receive_webhook(
        raw_body,
        x_lenco_signature,
        handler,
        app_settings.lenco_webhook_hash_key,
        event_log_dir=app_settings.webhook_event_log_dir,
    )

    if status_code == status.HTTP_202_ACCEPTED:
        return JSONResponse({"status": "accepted"}, status_code=status_code)
    return JSONResponse({"detail": WEBHOOK_STATUS_MESSAGES[status_code]}, status_code=status_code)


@router.post(
    "/shipments/callback",
    response_model=ShipmentResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_shipment(
    body: CreateShipmentRequest,
    service: ShipmentService = Depends(get_shipment_service),
) -> ShipmentResponse:
    """Book a shipment with Mercury and store it."""
    return await service.create_shipment(body)


@router.post(
    "/shipments/delivery-request",
    response_model=DeliveryRequestResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_delivery_request(
    body: CreateDeliveryRequest,
    service: ShipmentService = Depends(get_shipment_service),
) -> DeliveryRequestResponse:
    """Store a delivery request (booking when Mercury data is given) and email customer and staff."""
    return await service.create_delivery_request(body)


@router.get("/shipments/quotation", response_model=GetFreightResponse)
async def get_quotation(
    query: QuotationQuery = Depends(),
    service: ShipmentService = Depends(get_shipment_service),
) -> GetFreightResponse:
    return await service.get_quotation(query.to_request())


async def _require_local_shipment(service: ShipmentService, waybill: str) -> None:
    if await service.get_shipment_by_waybill(waybill) is None:
        logger.warning(f"Tracking requested for unknown waybill {waybill}")
        raise ShipmentNotFoundError(waybill)


@router.get("/tracking/status/{waybill}", response_model=TrackShipmentResponse)
async def get_tracking_status(
    waybill: str,
    service: ShipmentService = Depends(get_shipment_service),
    mercury_client: MercuryClient = Depends(get_mercury_client_stub),
) -> TrackShipmentResponse:
    """Latest Mercury status for a waybill booked by this service."""
    await _require_local_shipment(service, waybill)
    return await mercury_client.get_shipment_status(waybill)


@router.get("/tracking/{waybill}", response_model=TrackShipmentResponse)
async def get_tracking_details(
    waybill: str,
    service: ShipmentService = Depends(get_shipment_service),
    mercury_client: MercuryClient = Depends(get_mercury_client_stub),
) -> TrackShipmentResponse:
    """Full Mercury tracking history for a waybill booked by this service."""
    await _require_local_shipment(service, waybill)
    return await mercury_client.get_shipment_tracking_details(waybill)

"""Shared fixtures for the lenco_shipping test suite."""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Dict, List, Optional

import httpx
import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from lenco_shipping.config.settings import Settings
from lenco_shipping.core.errors import MercuryAPIError
from lenco_shipping.db import Shipment, ShipmentRepository, get_session_factory, init_db
from lenco_shipping.integrations.mail import MailService
from lenco_shipping.models.mercury import (
    BookCollectionRequest,
    BookCollectionResponse,
    GetFreightRequest,
    GetFreightResponse,
    TrackShipmentResponse,
)
from lenco_shipping.models.notification import NotificationPayload, NotificationResult

HASH_KEY = "test-lenco-hash-key"


@pytest.fixture()
def app_settings() -> Settings:
    """Settings built from explicit values; no .env or environment lookup."""
    return Settings(
        _env_file=None,
        lenco_webhook_hash_key=HASH_KEY,
        resend_api_key="re_test_key",
        resend_api_url="https://resend.test",
        mail_from_email="store@example.com",
        staff_emails="ops@example.com, warehouse@example.com",
        mercury_api_url="http://mercury.test/app",
        mercury_email="merchant@example.com",
        mercury_private_key="mercury-secret",
        database_url="sqlite+aiosqlite:///:memory:",
    )


class FakeMailService:
    """Records notify() calls; optionally reports failures like MailService does."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: List[Dict] = []

    async def notify(self, customer_email: Optional[str], details: NotificationPayload) -> NotificationResult:
        self.calls.append({"customer_email": customer_email, "details": details})
        if self.fail:
            return NotificationResult(errors=["staff: Resend rejected email: 500"])
        return NotificationResult(customer_sent=bool(customer_email), staff_sent=True)

    async def close(self) -> None:
        pass


class FakeMercuryClient:
    """In-memory stand-in for MercuryClient."""

    def __init__(
        self,
        waybills: Optional[List[str]] = None,
        rate: Optional[float] = 45.5,
        error: Optional[Exception] = None,
    ):
        self.waybills = ["WB123"] if waybills is None else waybills
        self.rate = rate
        self.error = error
        self.calls: List[str] = []

    async def book_collection(self, request: BookCollectionRequest) -> BookCollectionResponse:
        self.calls.append("book_collection")
        if self.error:
            raise self.error
        return BookCollectionResponse(error_code=508, error_msg="Success", rate=self.rate, waybills=self.waybills)

    async def get_freight_quotation(self, request: GetFreightRequest) -> GetFreightResponse:
        self.calls.append("get_freight_quotation")
        if self.error:
            raise self.error
        return GetFreightResponse(error_code=508, error_msg="Success", rate=self.rate)

    async def get_shipment_tracking_details(self, waybill: str) -> TrackShipmentResponse:
        self.calls.append("get_shipment_tracking_details")
        return TrackShipmentResponse(
            error_code=508,
            error_msg="Success",
            detail=[{"status_timestamp": "2024-05-01 10:00", "location": "Lusaka", "status_comment": "Picked up"}],
            other_detail={"receiver_name": None, "pod": None},
        )

    async def get_shipment_status(self, waybill: str) -> TrackShipmentResponse:
        self.calls.append("get_shipment_status")
        return TrackShipmentResponse(
            error_code=508,
            error_msg="Success",
            detail=[{"status_timestamp": "2024-05-02 09:30", "location": "Ndola", "status_comment": "Delivered"}],
        )

    async def close(self) -> None:
        pass


class InMemoryShipmentRepository:
    """ShipmentRepository lookalike that keeps rows in a dict."""

    def __init__(self):
        self.rows: Dict[str, Shipment] = {}

    async def create(
        self,
        order_id: str,
        user_email: str,
        status: str,
        waybill: Optional[str] = None,
        rate: Optional[Decimal] = None,
    ) -> Shipment:
        now = datetime.now(timezone.utc)
        shipment = Shipment(
            id=str(uuid.uuid4()),
            order_id=order_id,
            user_email=user_email,
            waybill=waybill,
            rate=rate,
            status=status,
            created_at=now,
            updated_at=now,
        )
        self.rows[shipment.id] = shipment
        return shipment

    async def get_by_waybill(self, waybill: str) -> Optional[Shipment]:
        for shipment in self.rows.values():
            if shipment.waybill == waybill:
                return shipment
        return None


@pytest.fixture()
def fake_mail() -> FakeMailService:
    return FakeMailService()


@pytest.fixture()
def fake_mercury() -> FakeMercuryClient:
    return FakeMercuryClient()


@pytest.fixture()
def memory_repository() -> InMemoryShipmentRepository:
    return InMemoryShipmentRepository()


@pytest.fixture()
async def db_session():
    """Fresh in-memory SQLite database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)
    session_factory = get_session_factory(engine)

    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture()
def repository(db_session) -> ShipmentRepository:
    return ShipmentRepository(db_session)


class RecordingTransport:
    """Builds an httpx.MockTransport that records requests and answers via a callback."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []
        self._responder = responder

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responder(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture()
def resend_ok() -> RecordingTransport:
    return RecordingTransport(lambda request: httpx.Response(200, json={"id": "email_123"}))


@pytest.fixture()
def resend_down() -> RecordingTransport:
    return RecordingTransport(lambda request: httpx.Response(500, json={"message": "internal error"}))


@pytest.fixture()
async def mail_service(app_settings, resend_ok):
    service = MailService(app_settings, transport=resend_ok.transport)
    yield service
    await service.close()


def booking_payload(**overrides) -> dict:
    """A complete Mercury booking request body."""
    payload = {
        "domestic_service": 1,
        "international_service": 0,
        "insurance": 0,
        "shipment": [
            {
                "shipment_pickup_address": [
                    {
                        "s_first_name": "Sya",
                        "s_last_name": "Store",
                        "s_country": "Zambia",
                        "s_statelist": "Lusaka",
                        "s_city": "Lusaka",
                        "s_add_1": "Plot 10 Cairo Road",
                        "s_mobile_no": "260970000000",
                        "s_email": "store@example.com",
                    }
                ],
                "shipment_delivery_address": [
                    {
                        "r_first_name": "Jane",
                        "r_last_name": "Doe",
                        "r_country": "Zambia",
                        "r_statelist": "Copperbelt",
                        "r_city": "Ndola",
                        "r_add_1": "12 Way St",
                        "r_mobile_no": "260971111111",
                        "r_email": "jane.doe@example.com",
                    }
                ],
                "shipment_details": [{"paymenttype": 1}],
                "item_details": [
                    {
                        "pieces": 1,
                        "length": 10,
                        "width": 10,
                        "height": 10,
                        "gross_weight": 2.5,
                        "declared_value": 500,
                    }
                ],
            }
        ],
    }
    payload.update(overrides)
    return payload


MERCURY_REJECTION = MercuryAPIError("Invalid destination city", error_code=401)

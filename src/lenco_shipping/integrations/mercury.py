"""Mercury freight API client."""

from typing import Any, Dict, Optional, Type, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from lenco_shipping.config.constants import (
    MERCURY_BOOK_COLLECTION_PATH,
    MERCURY_FREIGHT_QUOTATION_PATH,
    MERCURY_SUCCESS_CODE,
    MERCURY_TRACKING_DETAILS_PATH,
    MERCURY_TRACKING_STATUS_PATH,
)
from lenco_shipping.config.settings import Settings
from lenco_shipping.core.errors import MercuryAPIError, MercuryRequestError
from lenco_shipping.core.logger import setup_logger
from lenco_shipping.models.mercury import (
    BookCollectionRequest,
    BookCollectionResponse,
    GetFreightRequest,
    GetFreightResponse,
    TrackShipmentResponse,
)

logger = setup_logger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)


async def _log_request(request: httpx.Request) -> None:
    logger.info(f"Mercury request: {request.method} {request.url.path}")


async def _log_response(response: httpx.Response) -> None:
    logger.info(f"Mercury response: {response.status_code} {response.request.url.path}")


class MercuryClient:
    """Async HTTP client for the Mercury booking, quotation and tracking API."""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client from configuration.

        Args:
            settings: Application settings (base URL, credentials, timeout)
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.email = settings.mercury_email
        self.private_key = settings.mercury_private_key
        self.client = httpx.AsyncClient(
            base_url=settings.mercury_api_url,
            timeout=settings.mercury_timeout_seconds,
            headers={"Content-Type": "application/json"},
            event_hooks={"request": [_log_request], "response": [_log_response]},
            transport=transport,
        )

        if not (self.email and self.private_key):
            logger.warning("Mercury credentials not configured (MERCURY_EMAIL / MERCURY_PRIVATE_KEY)")

    def _credentials(self, email: Optional[str], private_key: Optional[str]) -> Dict[str, str]:
        """Request-supplied credentials win over configured ones."""
        return {
            "email": email or self.email,
            "private_key": private_key or self.private_key,
        }

    async def _make_request(
        self,
        method: str,
        path: str,
        response_model: Type[ResponseT],
        failure_message: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> ResponseT:
        """
        Call Mercury and translate its error_code convention.

        Raises:
            MercuryAPIError: Mercury answered with a non-success error_code
            MercuryRequestError: the call failed or the response was unusable
        """
        try:
            response = await self.client.request(method, path, params=params, json=json)
            response.raise_for_status()
            data = response_model.model_validate(response.json())
        except httpx.HTTPError as e:
            logger.error(f"HTTP error calling Mercury {path}: {e}")
            raise MercuryRequestError(f"{failure_message} via Mercury API") from e
        except (ValueError, ValidationError) as e:
            logger.error(f"Unexpected response from Mercury {path}: {e}")
            raise MercuryRequestError(f"{failure_message} via Mercury API") from e

        if data.error_code != MERCURY_SUCCESS_CODE:
            logger.error(f"Mercury error on {path}: code={data.error_code} msg={data.error_msg}")
            raise MercuryAPIError(data.error_msg or failure_message, error_code=data.error_code)

        return data

    async def book_collection(self, request: BookCollectionRequest) -> BookCollectionResponse:
        """
        Book a collection (shipment) with Mercury.

        Args:
            request: Booking payload; missing credentials are filled from settings

        Returns:
            Response with the assigned waybill(s) and quoted rate
        """
        payload = request.model_dump(mode="json")
        payload.update(self._credentials(request.email, request.private_key))

        return await self._make_request(
            "POST",
            MERCURY_BOOK_COLLECTION_PATH,
            BookCollectionResponse,
            "Failed to book collection",
            json=payload,
        )

    async def get_freight_quotation(self, request: GetFreightRequest) -> GetFreightResponse:
        """Get a freight rate quote without booking anything."""
        payload = request.model_dump(mode="json")
        payload.update(self._credentials(request.email, request.private_key))

        return await self._make_request(
            "POST",
            MERCURY_FREIGHT_QUOTATION_PATH,
            GetFreightResponse,
            "Failed to get freight quotation",
            json=payload,
        )

    async def get_shipment_tracking_details(self, waybill: str) -> TrackShipmentResponse:
        """Full tracking history for a waybill."""
        return await self._make_request(
            "GET",
            MERCURY_TRACKING_DETAILS_PATH.format(waybill=quote(waybill, safe="")),
            TrackShipmentResponse,
            "Failed to get tracking details",
            params=self._credentials(None, None),
        )

    async def get_shipment_status(self, waybill: str) -> TrackShipmentResponse:
        """Latest tracking status for a waybill."""
        return await self._make_request(
            "GET",
            MERCURY_TRACKING_STATUS_PATH.format(waybill=quote(waybill, safe="")),
            TrackShipmentResponse,
            "Failed to get shipment status",
            params=self._credentials(None, None),
        )

    async def close(self) -> None:
        """Close HTTP client connection."""
        await self.client.aclose()

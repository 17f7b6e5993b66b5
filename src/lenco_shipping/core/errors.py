"""Exception types shared across the service.

Each error carries the HTTP status the API layer answers with.
"""

from typing import Optional


class ServiceError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MercuryAPIError(ServiceError):
    """Mercury answered, but with a non-success error_code."""

    status_code = 400

    def __init__(self, message: str, error_code: Optional[int] = None):
        super().__init__(message)
        self.error_code = error_code


class MercuryRequestError(ServiceError):
    """The call to Mercury itself failed (network, timeout, bad response)."""

    status_code = 502


class ShipmentNotFoundError(ServiceError):
    """No shipment with the requested waybill was booked by this service."""

    status_code = 404

    def __init__(self, waybill: str):
        super().__init__("Shipment not found")
        self.waybill = waybill


class MailDeliveryError(Exception):
    """Sending an email through Resend failed."""

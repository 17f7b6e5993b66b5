"""Business services."""

from lenco_shipping.services.shipment_service import ShipmentService, format_shipping_address

__all__ = ["ShipmentService", "format_shipping_address"]

"""Repository for shipment data access."""

from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Shipment


class ShipmentRepository:
    """Data access layer for Shipment model."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with async session."""
        self.session = session

    async def create(
        self,
        order_id: str,
        user_email: str,
        status: str,
        waybill: Optional[str] = None,
        rate: Optional[Decimal] = None,
    ) -> Shipment:
        """Insert a single shipment row and return it with generated fields."""
        shipment = Shipment(
            order_id=order_id,
            user_email=user_email,
            waybill=waybill,
            rate=rate,
            status=status,
        )
        self.session.add(shipment)
        await self.session.commit()
        await self.session.refresh(shipment)
        return shipment

    async def get_by_waybill(self, waybill: str) -> Optional[Shipment]:
        """Get the shipment holding a waybill, if any."""
        query = select(Shipment).where(Shipment.waybill == waybill)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

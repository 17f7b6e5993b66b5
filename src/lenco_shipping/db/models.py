"""SQLAlchemy models for shipment data."""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from lenco_shipping.config.constants import SHIPMENT_STATUS_PENDING

from .base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class Shipment(Base):
    """
    A shipment booked (or requested) for a storefront order.

    The waybill stays NULL until Mercury returns one and is never rewritten
    afterwards; it is unique across all rows that have one.
    """

    __tablename__ = "shipments"

    # Primary Key
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)

    # Order fields
    order_id: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    user_email: Mapped[str] = mapped_column(String(255), nullable=False)

    # Booking fields
    waybill: Mapped[Optional[str]] = mapped_column(String(100), unique=True, nullable=True)
    rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    status: Mapped[str] = mapped_column(String(50), default=SHIPMENT_STATUS_PENDING, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Shipment id={self.id} order_id={self.order_id} waybill={self.waybill} status={self.status}>"

"""Database module."""

from .base import Base, get_engine, get_session_factory, init_db
from .models import Shipment
from .repository import ShipmentRepository

__all__ = ["Base", "get_engine", "get_session_factory", "init_db", "Shipment", "ShipmentRepository"]

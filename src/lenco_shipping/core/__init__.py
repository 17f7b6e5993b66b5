"""Core module - Logging, signature verification, errors and event logging."""

from lenco_shipping.core.logger import setup_logger
from lenco_shipping.core.signature import compute_signature, verify_lenco_signature

__all__ = ["setup_logger", "compute_signature", "verify_lenco_signature"]

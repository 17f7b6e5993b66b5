"""Integrations module - Third-party services (Mercury shipping, Resend email)."""

from lenco_shipping.integrations.mail import MailService
from lenco_shipping.integrations.mercury import MercuryClient

__all__ = ["MailService", "MercuryClient"]

"""Webhook handlers."""

from lenco_shipping.handlers.webhook import LencoWebhookHandler, extract_email, receive_webhook

__all__ = ["LencoWebhookHandler", "extract_email", "receive_webhook"]

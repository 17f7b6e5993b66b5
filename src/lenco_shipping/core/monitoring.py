"""
GlitchTip Error Monitoring Utilities

Helper functions for error tracking and context management.
"""

from typing import Any, Dict, Optional

from lenco_shipping.core.logger import setup_logger

logger = setup_logger(__name__)


def init_monitoring(dsn: Optional[str], environment: str) -> bool:
    """
    Initialize GlitchTip (Sentry-compatible) error monitoring.

    Returns:
        True if monitoring was enabled
    """
    if not dsn:
        return False

    try:
        import logging

        import sentry_sdk
        from sentry_sdk.integrations.fastapi import FastApiIntegration
        from sentry_sdk.integrations.logging import LoggingIntegration

        sentry_sdk.init(
            dsn=dsn,
            environment=environment,
            integrations=[
                FastApiIntegration(transaction_style="endpoint"),
                LoggingIntegration(
                    level=None,  # Capture all log levels as breadcrumbs
                    event_level=logging.ERROR,  # Send ERROR logs as events
                ),
            ],
            traces_sample_rate=0.1,
            profiles_sample_rate=0.0,
            send_default_pii=False,  # Customer emails stay out of GlitchTip
        )
        logger.info("GlitchTip error monitoring initialized")
        return True
    except Exception as e:
        logger.error(f"Failed to initialize GlitchTip: {e}")
        return False


def set_webhook_context(event: str, **extra_tags: Any) -> None:
    """
    Set webhook-specific context for error tracking.

    Args:
        event: Lenco event name
        **extra_tags: Additional tags to add
    """
    try:
        import sentry_sdk

        sentry_sdk.set_tag("webhook.event", event)
        for key, value in extra_tags.items():
            sentry_sdk.set_tag(key, value)

        context_data: Dict[str, Any] = {"event": event}
        context_data.update(extra_tags)
        sentry_sdk.set_context("webhook", context_data)
    except Exception as e:
        logger.warning(f"Failed to set webhook context: {e}")

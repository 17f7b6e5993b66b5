"""Lenco Webhook Signature Verification.

Verifies that incoming webhooks are genuinely from Lenco using HMAC-SHA512
keyed with the pre-shared webhook hash key. This is a shared-secret scheme:
the key must never leave the server.
"""

import hashlib
import hmac
from typing import Optional, Union

from lenco_shipping.core.logger import setup_logger

logger = setup_logger(__name__)


def compute_signature(request_body: Union[bytes, str], hash_key: str) -> str:
    """Hex HMAC-SHA512 of the request body."""
    if isinstance(request_body, str):
        request_body = request_body.encode("utf-8")

    return hmac.new(
        hash_key.encode("utf-8"),
        request_body,
        hashlib.sha512,
    ).hexdigest()


def verify_lenco_signature(
    request_body: Union[bytes, str],
    signature_header: Optional[str],
    hash_key: Optional[str],
) -> bool:
    """
    Verify a Lenco webhook signature.

    Args:
        request_body: Raw request body exactly as received (NOT re-serialized JSON)
        signature_header: Value from the x-lenco-signature header
        hash_key: Pre-shared webhook hash key

    Returns:
        True if the signature matches. Never raises: any error yields False.
    """
    if not signature_header:
        logger.warning("Webhook received without signature header")
        return False

    if not hash_key:
        logger.warning("LENCO_WEBHOOK_HASH_KEY not configured - rejecting webhook")
        return False

    try:
        expected_signature = compute_signature(request_body, hash_key)

        # Case-sensitive hex comparison, constant time
        if hmac.compare_digest(expected_signature, signature_header):
            logger.debug("Valid webhook signature")
            return True
    except Exception as e:
        logger.error(f"Error verifying signature: {e}")
        return False

    logger.warning(f"Invalid webhook signature. Got: {signature_header[:16]}...")
    return False

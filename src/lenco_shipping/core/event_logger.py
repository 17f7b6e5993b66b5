"""
Webhook Event Logger

Appends every verified Lenco webhook delivery to a daily JSONL file so an
operator can replay or inspect what was received. Disabled unless a log
directory is configured.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from lenco_shipping.core.logger import setup_logger

logger = setup_logger(__name__)


def log_webhook_event(
    log_dir: Optional[str],
    event: str,
    event_data: Dict[str, Any],
    signature_header: Optional[str] = None,
    raw_body: Optional[bytes] = None,
    processing_status: Optional[str] = None,
) -> Optional[Path]:
    """
    Log a webhook event to a daily JSONL file.

    Args:
        log_dir: Directory for the JSONL files (None = disabled)
        event: Lenco event name
        event_data: The envelope's data object
        signature_header: Signature header (truncated before writing)
        raw_body: Raw request body (only its size is recorded)
        processing_status: "processed" or "failed"

    Returns:
        Path of the file written, or None when disabled or on error
    """
    if not log_dir:
        return None

    now = datetime.now(timezone.utc)
    log_file = Path(log_dir) / f"webhook_events_{now.strftime('%Y-%m-%d')}.jsonl"

    log_entry = {
        "timestamp": now.isoformat(),
        "event": event,
        "event_data": event_data,
        "metadata": {
            "signature": f"{signature_header[:16]}..." if signature_header else None,
            "body_size": len(raw_body) if raw_body else 0,
        },
    }
    if processing_status:
        log_entry["processing_status"] = processing_status

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        with open(log_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(log_entry, ensure_ascii=False, default=str) + "\n")
        return log_file
    except OSError as e:
        logger.error(f"Failed to write webhook event to log file: {e}")
        return None

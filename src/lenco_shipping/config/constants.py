"""
Centralized application constants.

Single point of truth for provider codes, statuses and formats shared by the
webhook handlers and the shipment service.
"""

import re

# ==============================================================================
# MERCURY (SHIPPING PROVIDER)
# ==============================================================================

# Mercury reports success with this error_code on every endpoint
MERCURY_SUCCESS_CODE = 508

MERCURY_BOOK_COLLECTION_PATH = "/bookcollection"
MERCURY_FREIGHT_QUOTATION_PATH = "/getfreight"
MERCURY_TRACKING_DETAILS_PATH = "/getshipmenttrackingdetails/wbid/{waybill}"
MERCURY_TRACKING_STATUS_PATH = "/getshipmenttracking/wbid/{waybill}"

# ==============================================================================
# SHIPMENTS
# ==============================================================================

SHIPMENT_STATUS_PENDING = "pending"
SHIPMENT_STATUS_BOOKED = "booked"

# ==============================================================================
# EMAIL
# ==============================================================================

RESEND_TIMEOUT_SECONDS = 10.0

CUSTOMER_EMAIL_SUBJECT = "Your Order Payment Confirmed - Shipping Details"
STAFF_EMAIL_SUBJECT = "New Payment Received - Shipping Required"

# Finds an address embedded in free text (narration, references)
EMAIL_SEARCH_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")

# Sanity check applied to a found address before mailing it
EMAIL_VALID_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# ==============================================================================
# WEBHOOKS
# ==============================================================================

LENCO_SIGNATURE_HEADER = "x-lenco-signature"

"""Lenco webhook handling: authentication, envelope parsing and event dispatch."""

import json
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, Type

from pydantic import BaseModel, ValidationError

from lenco_shipping.config.constants import EMAIL_SEARCH_PATTERN, EMAIL_VALID_PATTERN
from lenco_shipping.core.event_logger import log_webhook_event
from lenco_shipping.core.logger import setup_logger
from lenco_shipping.core.monitoring import set_webhook_context
from lenco_shipping.core.signature import verify_lenco_signature
from lenco_shipping.integrations.mail import MailService
from lenco_shipping.models.notification import NotificationPayload, PayerBank, PayerDetails
from lenco_shipping.models.webhook import (
    AccountBalanceUpdatedData,
    CollectionSettledData,
    LencoEvent,
    LencoWebhookEnvelope,
    TransactionDetails,
    TransactionFailedData,
    TransactionSuccessfulData,
    VirtualAccountTransactionData,
    VirtualAccountTransactionSettledData,
)

logger = setup_logger(__name__)

EventHandler = Callable[[Any], Awaitable[None]]

HTTP_ACCEPTED = 202
HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401


def extract_email(*texts: Optional[str]) -> Optional[str]:
    """
    Find the first plausible email address in free text.

    Each text is searched in order; the first one containing an address
    wins. Returns None when nothing usable is found.
    """
    for text in texts:
        if not text:
            continue
        match = EMAIL_SEARCH_PATTERN.search(text)
        if match and EMAIL_VALID_PATTERN.match(match.group(0)):
            return match.group(0)
    return None


def _payer_from_details(details: Optional[TransactionDetails]) -> Optional[PayerDetails]:
    if not details:
        return None
    return PayerDetails(
        account_name=details.account_name,
        account_number=details.account_number,
        bank=PayerBank(name=details.bank.name, code=details.bank.code) if details.bank else None,
    )


class LencoWebhookHandler:
    """Routes verified Lenco events to one handler per event type."""

    def __init__(self, mail_service: MailService):
        """
        Build the dispatch table.

        Raises:
            RuntimeError: a LencoEvent member has no handler
        """
        self.mail_service = mail_service
        self._handlers = self._build_handlers()

        missing = [event.value for event in LencoEvent if event not in self._handlers]
        if missing:
            raise RuntimeError(f"No webhook handler registered for: {', '.join(missing)}")

    def _build_handlers(self) -> Dict[LencoEvent, Tuple[Type[BaseModel], EventHandler]]:
        """Payload model and handler for each event."""
        return {
            LencoEvent.TRANSACTION_SUCCESSFUL: (TransactionSuccessfulData, self.handle_transaction_success),
            LencoEvent.TRANSACTION_FAILED: (TransactionFailedData, self.handle_transaction_failure),
            LencoEvent.ACCOUNT_BALANCE_UPDATED: (AccountBalanceUpdatedData, self.handle_balance_update),
            LencoEvent.VIRTUAL_ACCOUNT_TRANSACTION: (
                VirtualAccountTransactionData,
                self.handle_virtual_account_transaction,
            ),
            LencoEvent.VIRTUAL_ACCOUNT_TRANSACTION_SETTLED: (
                VirtualAccountTransactionSettledData,
                self.handle_virtual_account_settled,
            ),
            LencoEvent.COLLECTION_SETTLED: (CollectionSettledData, self.handle_collection_settled),
        }

    async def handle(self, event: str, data: Dict[str, Any]) -> None:
        """
        Validate the event's data and run its handler.

        Unknown event names are logged and ignored. Validation and handler
        errors are logged with the event data and re-raised.
        """
        logger.info(f"Processing event: {event}")

        lenco_event = LencoEvent.parse(event)
        if lenco_event is None:
            logger.warning(f"Unhandled event: {event}")
            logger.warning(f"Event data: {json.dumps(data, default=str)}")
            return

        model, handler = self._handlers[lenco_event]
        try:
            await handler(model.model_validate(data))
        except Exception as e:
            logger.error(f"Error handling event {event}: {e}", exc_info=True)
            logger.error(f"Event data that caused error: {json.dumps(data, default=str)}")
            raise

        logger.info(f"Event {event} processed")

    async def _notify(self, customer_email: Optional[str], details: NotificationPayload, context: str) -> None:
        """Send customer (if known) and staff emails; failures are logged only."""
        if customer_email:
            logger.info(f"Customer email found for {context}: {customer_email}")
        else:
            logger.warning(f"No valid customer email found for {context} - sending staff email only")

        result = await self.mail_service.notify(customer_email, details)
        if not result.ok:
            logger.error(f"Error sending emails for {context}: {'; '.join(result.errors)}")

    async def handle_transaction_success(self, data: TransactionSuccessfulData) -> None:
        logger.info(f"Transaction successful: {data.id} - {data.transaction_reference}")

        details = NotificationPayload(
            transaction_reference=data.transaction_reference,
            amount=data.amount,
            narration=data.narration,
            payer=_payer_from_details(data.details),
            status=data.status,
        )
        await self._notify(extract_email(data.narration), details, f"transaction {data.id}")

    async def handle_transaction_failure(self, data: TransactionFailedData) -> None:
        # Log only for now; failed payments trigger no shipping
        logger.warning(f"Transaction failed: {data.id} - {data.reason_for_failure}")

    async def handle_balance_update(self, data: AccountBalanceUpdatedData) -> None:
        logger.info(f"Balance updated for account {data.id}: {data.available_balance} {data.currency}")

    async def handle_virtual_account_transaction(self, data: VirtualAccountTransactionData) -> None:
        logger.info(
            f"Virtual account transaction: {data.id} - {data.account_reference} - "
            f"Status: {data.settlement_status}"
        )

        details = NotificationPayload(
            transaction_reference=data.transaction_reference or None,
            amount=data.transaction_amount,
            narration=data.narration,
            payer=_payer_from_details(data.details),
            status=data.status,
        )
        await self._notify(
            extract_email(data.narration), details, f"virtual account transaction {data.id}"
        )

    async def handle_virtual_account_settled(self, data: VirtualAccountTransactionSettledData) -> None:
        logger.info(f"Virtual account transaction settled: {data.id} - {data.account_reference}")

        details = NotificationPayload(
            transaction_reference=data.transaction_reference or None,
            amount=data.transaction_amount,
            narration=data.narration,
            payer=_payer_from_details(data.details),
            status=data.settlement_status,
        )
        await self._notify(extract_email(data.narration), details, f"settled transaction {data.id}")

    async def handle_collection_settled(self, data: CollectionSettledData) -> None:
        logger.info(f"Collection settled: {data.id} - {data.reference} - Amount: {data.amount} {data.currency}")

        mobile_money = data.mobile_money_details
        payer = None
        if mobile_money:
            payer = PayerDetails(
                account_name=mobile_money.account_name,
                account_number=mobile_money.phone,
                bank=PayerBank(name=mobile_money.operator, code=mobile_money.country),
            )

        operator = mobile_money.operator if mobile_money and mobile_money.operator else "N/A"
        details = NotificationPayload(
            transaction_reference=data.reference or data.lenco_reference,
            amount=data.amount,
            narration=f"Payment via {data.type} - {operator}",
            payer=payer,
            status=data.settlement_status,
        )

        customer_email = extract_email(
            mobile_money.account_name if mobile_money else None,
            data.reference,
        )
        await self._notify(customer_email, details, f"collection {data.id}")


async def receive_webhook(
    raw_body: bytes,
    signature_header: Optional[str],
    handler: LencoWebhookHandler,
    hash_key: Optional[str],
    event_log_dir: Optional[str] = None,
) -> int:
    """
    Authenticate, parse and dispatch one webhook delivery.

    Returns:
        HTTP status for the response: 401 (missing/invalid signature),
        400 (malformed envelope) or 202 (accepted, even if processing failed)
    """
    if not signature_header:
        logger.warning("Missing signature header")
        return HTTP_UNAUTHORIZED

    try:
        envelope = LencoWebhookEnvelope.model_validate_json(raw_body)
    except ValidationError as e:
        logger.warning(f"Invalid webhook payload structure: {e.error_count()} error(s)")
        return HTTP_BAD_REQUEST

    if not verify_lenco_signature(raw_body, signature_header, hash_key):
        logger.warning("Invalid signature verification")
        return HTTP_UNAUTHORIZED

    logger.info(f"Webhook received: event={envelope.event}")
    set_webhook_context(envelope.event)

    processing_status = "processed"
    try:
        await handler.handle(envelope.event, envelope.data)
    except Exception as e:
        # Still acknowledged with 202
        processing_status = "failed"
        logger.error(f"Error processing webhook {envelope.event}: {e}")

    log_webhook_event(
        event_log_dir,
        envelope.event,
        envelope.data,
        signature_header=signature_header,
        raw_body=raw_body,
        processing_status=processing_status,
    )
    return HTTP_ACCEPTED

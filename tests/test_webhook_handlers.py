"""Tests for Lenco event dispatch and email extraction."""

import json

import pytest

from conftest import HASH_KEY, FakeMailService
from lenco_shipping.core.signature import compute_signature
from lenco_shipping.handlers.webhook import LencoWebhookHandler, extract_email, receive_webhook
from lenco_shipping.models.webhook import LencoEvent


def transaction_successful(narration: str = "Payment from jane.doe@example.com for order 42") -> dict:
    return {
        "id": "txn_001",
        "amount": "150.00",
        "fee": "1.50",
        "narration": narration,
        "type": "credit",
        "status": "successful",
        "transactionReference": "LNC-REF-001",
        "details": {
            "accountName": "Jane Doe",
            "accountNumber": "0123456789",
            "bank": {"code": "058", "name": "Zanaco"},
        },
    }


def collection_settled() -> dict:
    return {
        "id": "col_001",
        "amount": 250,
        "currency": "ZMW",
        "reference": None,
        "lencoReference": "LNC-COL-9",
        "type": "mobile-money",
        "status": "successful",
        "settlementStatus": "settled",
        "mobileMoneyDetails": {
            "country": "zm",
            "phone": "0971234567",
            "operator": "airtel",
            "accountName": "buyer@example.com",
        },
    }


class TestExtractEmail:
    def test_finds_address_in_narration(self):
        assert extract_email("Payment from jane.doe@example.com for order 42") == "jane.doe@example.com"

    def test_no_address(self):
        assert extract_email("Payment for order 42") is None

    def test_empty_and_none(self):
        assert extract_email(None) is None
        assert extract_email("") is None

    def test_first_text_with_address_wins(self):
        assert extract_email(None, "no mail here", "ref a@b.co") == "a@b.co"


class TestDispatchTable:
    def test_every_event_has_a_handler(self, fake_mail):
        handler = LencoWebhookHandler(fake_mail)
        assert set(handler._handlers) == set(LencoEvent)

    def test_incomplete_table_fails_at_construction(self, fake_mail):
        class Incomplete(LencoWebhookHandler):
            def _build_handlers(self):
                table = super()._build_handlers()
                del table[LencoEvent.COLLECTION_SETTLED]
                return table

        with pytest.raises(RuntimeError, match="collection.settled"):
            Incomplete(fake_mail)


class TestHandle:
    async def test_unknown_event_is_ignored(self, fake_mail):
        await LencoWebhookHandler(fake_mail).handle("payout.created", {"id": "x"})
        assert fake_mail.calls == []

    async def test_transaction_successful_notifies_customer_and_staff(self, fake_mail):
        await LencoWebhookHandler(fake_mail).handle("transaction.successful", transaction_successful())

        assert len(fake_mail.calls) == 1
        call = fake_mail.calls[0]
        assert call["customer_email"] == "jane.doe@example.com"
        details = call["details"]
        assert details.transaction_reference == "LNC-REF-001"
        assert details.amount == "150.00"
        assert details.status == "successful"
        assert details.payer.account_name == "Jane Doe"
        assert details.payer.bank.name == "Zanaco"

    async def test_no_email_in_narration_is_staff_only(self, fake_mail):
        await LencoWebhookHandler(fake_mail).handle(
            "transaction.successful", transaction_successful(narration="Order 42")
        )
        assert fake_mail.calls[0]["customer_email"] is None

    async def test_notification_failure_is_not_raised(self):
        mail = FakeMailService(fail=True)
        await LencoWebhookHandler(mail).handle("transaction.successful", transaction_successful())
        assert len(mail.calls) == 1

    async def test_virtual_account_transaction_uses_transaction_amount(self, fake_mail):
        data = {
            "id": "va_txn_1",
            "transactionAmount": "99.99",
            "status": "successful",
            "settlementStatus": "pending",
            "narration": "shop order buyer@example.com",
            "transactionReference": "VA-REF-1",
            "accountReference": "ACC-1",
        }
        await LencoWebhookHandler(fake_mail).handle("virtual-account.transaction", data)

        details = fake_mail.calls[0]["details"]
        assert details.amount == "99.99"
        assert details.status == "successful"
        assert fake_mail.calls[0]["customer_email"] == "buyer@example.com"

    async def test_virtual_account_settled_uses_settlement_status(self, fake_mail):
        data = {
            "id": "va_txn_2",
            "transactionAmount": "10.00",
            "status": "successful",
            "settlementStatus": "settled",
            "narration": "no address",
        }
        await LencoWebhookHandler(fake_mail).handle("virtual-account.transaction.settled", data)
        assert fake_mail.calls[0]["details"].status == "settled"

    async def test_collection_settled(self, fake_mail):
        await LencoWebhookHandler(fake_mail).handle("collection.settled", collection_settled())

        call = fake_mail.calls[0]
        details = call["details"]
        assert call["customer_email"] == "buyer@example.com"
        assert details.transaction_reference == "LNC-COL-9"
        assert details.narration == "Payment via mobile-money - airtel"
        assert details.amount == "250"
        assert details.status == "settled"
        assert details.payer.account_number == "0971234567"
        assert details.payer.bank.name == "airtel"
        assert details.payer.bank.code == "zm"

    async def test_collection_without_mobile_money(self, fake_mail):
        data = collection_settled()
        data["mobileMoneyDetails"] = None
        data["reference"] = "order-7"
        await LencoWebhookHandler(fake_mail).handle("collection.settled", data)

        call = fake_mail.calls[0]
        assert call["customer_email"] is None
        assert call["details"].narration == "Payment via mobile-money - N/A"
        assert call["details"].transaction_reference == "order-7"

    async def test_failed_and_balance_events_only_log(self, fake_mail):
        handler = LencoWebhookHandler(fake_mail)
        await handler.handle("transaction.failed", {"id": "txn_2", "reasonForFailure": "declined"})
        await handler.handle("account.balance-updated", {"id": "acc_1", "availableBalance": "10"})
        assert fake_mail.calls == []

    async def test_invalid_data_is_raised(self, fake_mail):
        with pytest.raises(ValueError):
            await LencoWebhookHandler(fake_mail).handle("transaction.successful", {"amount": "1"})


def signed(body: dict):
    raw = json.dumps(body).encode("utf-8")
    return raw, compute_signature(raw, HASH_KEY)


class RaisingHandler(LencoWebhookHandler):
    def __init__(self, mail_service):
        super().__init__(mail_service)
        self.handled = []

    async def handle(self, event, data):
        self.handled.append(event)
        raise RuntimeError("boom")


class TestReceiveWebhook:
    async def test_missing_signature_is_401_and_not_handled(self, fake_mail):
        handler = RaisingHandler(fake_mail)
        raw, _ = signed({"event": "transaction.successful", "data": transaction_successful()})

        assert await receive_webhook(raw, None, handler, HASH_KEY) == 401
        assert handler.handled == []

    async def test_invalid_signature_is_401(self, fake_mail):
        handler = RaisingHandler(fake_mail)
        raw, _ = signed({"event": "transaction.successful", "data": transaction_successful()})

        assert await receive_webhook(raw, "deadbeef", handler, HASH_KEY) == 401
        assert handler.handled == []

    @pytest.mark.parametrize(
        "raw",
        [
            b"not json",
            b"[]",
            b'{"event": "transaction.successful"}',
            b'{"data": {}}',
            b'{"event": "transaction.successful", "data": "text"}',
        ],
    )
    async def test_malformed_envelope_is_400(self, fake_mail, raw):
        status = await receive_webhook(raw, compute_signature(raw, HASH_KEY), LencoWebhookHandler(fake_mail), HASH_KEY)
        assert status == 400

    async def test_handler_error_still_202(self, fake_mail):
        handler = RaisingHandler(fake_mail)
        raw, signature = signed({"event": "transaction.successful", "data": transaction_successful()})

        assert await receive_webhook(raw, signature, handler, HASH_KEY) == 202
        assert handler.handled == ["transaction.successful"]

    async def test_unknown_event_is_202_without_email(self, fake_mail):
        raw, signature = signed({"event": "payout.created", "data": {"id": "p1"}})

        assert await receive_webhook(raw, signature, LencoWebhookHandler(fake_mail), HASH_KEY) == 202
        assert fake_mail.calls == []

    async def test_accepted_event_is_written_to_event_log(self, fake_mail, tmp_path):
        raw, signature = signed({"event": "transaction.successful", "data": transaction_successful()})

        await receive_webhook(raw, signature, LencoWebhookHandler(fake_mail), HASH_KEY, event_log_dir=str(tmp_path))

        log_files = list(tmp_path.glob("webhook_events_*.jsonl"))
        assert len(log_files) == 1
        events = [json.loads(line) for line in log_files[0].read_text(encoding="utf-8").splitlines()]
        assert len(events) == 1
        assert events[0]["event"] == "transaction.successful"
        assert events[0]["processing_status"] == "processed"
        assert events[0]["metadata"]["body_size"] == len(raw)

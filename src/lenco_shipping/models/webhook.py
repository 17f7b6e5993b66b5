"""Pydantic models for Lenco webhook events."""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class LencoEvent(str, Enum):
    """Every event name Lenco delivers to this service."""

    TRANSACTION_SUCCESSFUL = "transaction.successful"
    TRANSACTION_FAILED = "transaction.failed"
    ACCOUNT_BALANCE_UPDATED = "account.balance-updated"
    VIRTUAL_ACCOUNT_TRANSACTION = "virtual-account.transaction"
    VIRTUAL_ACCOUNT_TRANSACTION_SETTLED = "virtual-account.transaction.settled"
    COLLECTION_SETTLED = "collection.settled"

    @classmethod
    def parse(cls, value: str) -> Optional["LencoEvent"]:
        """Map a raw event name to a member, None when unknown."""
        try:
            return cls(value)
        except ValueError:
            return None


class LencoModel(BaseModel):
    """Base for Lenco payloads: camelCase on the wire, unknown fields kept."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        coerce_numbers_to_str = True
        extra = "allow"


class LencoWebhookEnvelope(BaseModel):
    """Top-level webhook body: {"event": ..., "data": {...}}."""

    event: str = Field(..., min_length=1, description="Lenco event name")
    data: Dict[str, Any] = Field(..., description="Event-specific payload")

    class Config:
        extra = "allow"


class BankDetails(LencoModel):
    code: Optional[str] = None
    name: Optional[str] = None


class TransactionDetails(LencoModel):
    """Counterparty account attached to a transaction."""

    account_name: Optional[str] = None
    account_number: Optional[str] = None
    bank: Optional[BankDetails] = None


class TransactionData(LencoModel):
    """Fields shared by transaction.successful and transaction.failed."""

    id: str
    amount: Optional[str] = None
    fee: Optional[str] = None
    narration: Optional[str] = None
    type: Optional[str] = None
    initiated_at: Optional[str] = None
    completed_at: Optional[str] = None
    account_id: Optional[str] = None
    details: Optional[TransactionDetails] = None
    status: Optional[str] = None
    failed_at: Optional[str] = None
    reason_for_failure: Optional[str] = None
    client_reference: Optional[str] = None
    transaction_reference: Optional[str] = None
    nip_session_id: Optional[str] = None


class TransactionSuccessfulData(TransactionData):
    """transaction.successful payload."""


class TransactionFailedData(TransactionData):
    """transaction.failed payload."""


class BankAccount(LencoModel):
    account_name: Optional[str] = None
    account_number: Optional[str] = None
    bank: Optional[BankDetails] = None


class AccountBalanceUpdatedData(LencoModel):
    """account.balance-updated payload."""

    id: str
    name: Optional[str] = None
    bank_account: Optional[BankAccount] = None
    type: Optional[str] = None
    status: Optional[str] = None
    available_balance: Optional[str] = None
    current_balance: Optional[str] = None
    currency: Optional[str] = None
    created_at: Optional[str] = None


class VirtualAccount(LencoModel):
    id: Optional[str] = None
    account_reference: Optional[str] = None
    bank_account: Optional[BankAccount] = None
    type: Optional[str] = None
    status: Optional[str] = None
    created_at: Optional[str] = None
    expires_at: Optional[str] = None
    currency: Optional[str] = None


class VirtualAccountTransactionData(LencoModel):
    """virtual-account.transaction payload."""

    id: str
    transaction_amount: Optional[str] = None
    fee: Optional[str] = None
    stamp_duty: Optional[str] = None
    settlement_amount: Optional[str] = None
    currency: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    narration: Optional[str] = None
    details: Optional[TransactionDetails] = None
    virtual_account: Optional[VirtualAccount] = None
    account_reference: Optional[str] = None
    settlement_account_id: Optional[str] = None
    datetime: Optional[str] = None
    nip_session_id: Optional[str] = None
    transaction_reference: Optional[str] = None
    settlement_status: Optional[str] = None


class VirtualAccountTransactionSettledData(VirtualAccountTransactionData):
    """virtual-account.transaction.settled payload (settlementStatus is "settled")."""


class Settlement(LencoModel):
    id: Optional[str] = None
    amount_settled: Optional[str] = None
    currency: Optional[str] = None
    created_at: Optional[str] = None
    settled_at: Optional[str] = None
    status: Optional[str] = None
    type: Optional[str] = None
    account_id: Optional[str] = None


class MobileMoneyDetails(LencoModel):
    country: Optional[str] = None
    phone: Optional[str] = None
    operator: Optional[str] = None
    account_name: Optional[str] = None
    operator_transaction_id: Optional[str] = None


class CollectionSettledData(LencoModel):
    """collection.settled payload."""

    id: str
    initiated_at: Optional[str] = None
    completed_at: Optional[str] = None
    amount: Optional[str] = None
    fee: Optional[str] = None
    bearer: Optional[str] = None
    currency: Optional[str] = None
    reference: Optional[str] = None
    lenco_reference: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    source: Optional[str] = None
    reason_for_failure: Optional[str] = None
    settlement_status: Optional[str] = None
    settlement: Optional[Settlement] = None
    mobile_money_details: Optional[MobileMoneyDetails] = None
    bank_account_details: Optional[Any] = None
    card_details: Optional[Any] = None

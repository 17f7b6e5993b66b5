"""Pydantic models for email notifications."""

from typing import List, Optional

from pydantic import BaseModel, Field


class PayerBank(BaseModel):
    name: Optional[str] = None
    code: Optional[str] = None


class PayerDetails(BaseModel):
    """Who paid: account holder, account number and bank."""

    account_name: Optional[str] = None
    account_number: Optional[str] = None
    bank: Optional[PayerBank] = None


class NotificationPayload(BaseModel):
    """Everything the customer and staff emails render."""

    transaction_reference: Optional[str] = None
    amount: Optional[str] = None
    narration: Optional[str] = None
    payer: Optional[PayerDetails] = None
    shipping_address: Optional[str] = None
    waybill: Optional[str] = None
    status: Optional[str] = None
    customer_email: Optional[str] = None


class NotificationResult(BaseModel):
    """Outcome of a notify() call. Failures are recorded here, not raised."""

    customer_sent: bool = False
    staff_sent: bool = False
    errors: List[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


from datetime import datetime, UTC
from enum import Enum
from pydantic import BaseModel, Field, field_validator


class InvoiceStatus(str, Enum):
    UNPAID = "unpaid"
    PAID = "paid"


def as_utc(value: datetime | None) -> datetime | None:
    """Treat naive datetimes as UTC so stored and filter values compare."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class Invoice(BaseModel):
    id: str
    remark: str
    amount: float = Field(ge=0)
    value_date: datetime | None = Field(default=None)
    reference_number: str
    invoice_number: str
    status: InvoiceStatus = Field(default=InvoiceStatus.UNPAID)
    invoice_date: datetime | None = Field(default=None)

    @field_validator("value_date", "invoice_date")
    @classmethod
    def _normalize_timezone(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)


class InvoiceSummary(BaseModel):
    """Fields reported back after a bulk status update"""
    reference_number: str
    invoice_number: str
    invoice_date: datetime | None = None
    amount: float
    status: InvoiceStatus

    @classmethod
    def from_invoice(cls, invoice: Invoice) -> "InvoiceSummary":
        return cls(
            reference_number=invoice.reference_number,
            invoice_number=invoice.invoice_number,
            invoice_date=invoice.invoice_date,
            amount=invoice.amount,
            status=invoice.status,
        )


class VerificationRecord(BaseModel):
    remark: str
    amount: float = Field(ge=0)
    file_name: str
    bank: str
    invoice_number: str  # reference number of the matched invoice
    file_url: str
    invoice_id: str

"""
In-memory invoice and verification-record stores (for demo and tests).
In production, use the SQLite stores or another database.
"""
from typing import Dict, List, Optional
from ...models.invoice import Invoice, VerificationRecord
from .base import (
    DuplicateRecordError,
    InvoiceStoreBase,
    UpdateResult,
    VerificationRecordStoreBase,
    check_invoice_changes,
)
from .filters import Filter


class InMemoryInvoiceStore(InvoiceStoreBase):
    def __init__(self, invoices: Optional[List[Invoice]] = None):
        self._invoices: Dict[str, Invoice] = {}
        for invoice in invoices or []:
            self.add(invoice)

    def add(self, invoice: Invoice) -> None:
        """Store an invoice keyed by id"""
        self._invoices[invoice.id] = invoice.model_copy()

    def find(self, query: Filter) -> list[Invoice]:
        """Return copies of every invoice matching the filter, in insertion order"""
        return [inv.model_copy() for inv in self._invoices.values() if query.matches(inv)]

    def find_one(self, query: Filter) -> Optional[Invoice]:
        for invoice in self._invoices.values():
            if query.matches(invoice):
                return invoice.model_copy()
        return None

    def update_many(self, query: Filter, changes: dict) -> UpdateResult:
        check_invoice_changes(changes)
        matched = modified = 0
        for invoice_id, invoice in list(self._invoices.items()):
            if not query.matches(invoice):
                continue
            matched += 1
            updated = Invoice.model_validate({**invoice.model_dump(), **changes})
            if updated != invoice:
                self._invoices[invoice_id] = updated
                modified += 1
        return UpdateResult(matched_count=matched, modified_count=modified)

    def list_all(self) -> list:
        """List all invoices (for debugging)"""
        return [inv.model_copy() for inv in self._invoices.values()]


class InMemoryVerificationRecordStore(VerificationRecordStoreBase):
    def __init__(self):
        self._records: List[VerificationRecord] = []

    def find_one(self, query: Filter) -> Optional[VerificationRecord]:
        for record in self._records:
            if query.matches(record):
                return record.model_copy()
        return None

    def insert(self, record: VerificationRecord) -> None:
        """Insert a record, enforcing one record per (remark, amount)"""
        for existing in self._records:
            if existing.remark == record.remark and existing.amount == record.amount:
                raise DuplicateRecordError(record.remark, record.amount)
        self._records.append(record.model_copy())

    def list_all(self) -> list:
        """List all verification records (for debugging)"""
        return [r.model_copy() for r in self._records]

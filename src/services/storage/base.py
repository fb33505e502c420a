"""
Abstract base classes for invoice and verification-record storage.

Defines the interface that all store implementations must implement,
enabling dependency injection and easy swapping of storage backends.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
from ...models.invoice import Invoice, InvoiceStatus, VerificationRecord
from .filters import Filter


class DuplicateRecordError(Exception):
    """Raised when a verification record for (remark, amount) already exists."""

    def __init__(self, remark: str, amount: float):
        super().__init__(f"Verification record already exists for remark '{remark}' and amount {amount}")
        self.remark = remark
        self.amount = amount


@dataclass(frozen=True)
class UpdateResult:
    matched_count: int
    modified_count: int


class InvoiceStoreBase(ABC):
    """
    Abstract base class for invoice storage.

    Implementations can use:
    - In-memory storage (for testing/demo)
    - SQLite (for single-instance deployments)
    """

    @abstractmethod
    def add(self, invoice: Invoice) -> None:
        """
        Store an invoice created outside the reconciliation workflow.

        Args:
            invoice: Invoice to store (replaces any invoice with the same id)
        """
        pass

    @abstractmethod
    def find(self, query: Filter) -> list[Invoice]:
        """
        Find all invoices matching a filter.

        Args:
            query: Filter built against the Invoice model

        Returns:
            List of matching invoices (order is not significant)
        """
        pass

    @abstractmethod
    def find_one(self, query: Filter) -> Optional[Invoice]:
        """
        Find the first invoice matching a filter.

        Returns:
            Invoice or None if nothing matches
        """
        pass

    @abstractmethod
    def update_many(self, query: Filter, changes: dict) -> UpdateResult:
        """
        Apply field changes to every invoice matching a filter.

        Args:
            query: Filter built against the Invoice model
            changes: Mapping of field name to new value

        Returns:
            UpdateResult with matched and actually modified counts
        """
        pass


class VerificationRecordStoreBase(ABC):
    """Abstract base class for verification-record storage."""

    @abstractmethod
    def find_one(self, query: Filter) -> Optional[VerificationRecord]:
        """
        Find the first verification record matching a filter.

        Returns:
            VerificationRecord or None if nothing matches
        """
        pass

    @abstractmethod
    def insert(self, record: VerificationRecord) -> None:
        """
        Persist a new verification record.

        Raises:
            DuplicateRecordError: if a record with the same remark and amount exists
        """
        pass


def check_invoice_changes(changes: dict) -> dict:
    """
    Validate a bulk update against the Invoice model.

    Status may only move from unpaid to paid, so an update setting
    status back to unpaid is rejected.
    """
    if not changes:
        raise ValueError("update_many requires at least one change")
    for name in changes:
        if name not in Invoice.model_fields or name == "id":
            raise ValueError(f"Invoice field '{name}' cannot be updated")
    if "status" in changes:
        if InvoiceStatus(changes["status"]) != InvoiceStatus.PAID:
            raise ValueError("Invoice status can only transition to 'paid'")
    return changes

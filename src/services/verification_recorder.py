"""
Persists verification records for matched payment advice.

One record exists per (remark, amount). A repeated verification of the same
payment neither uploads the image again nor inserts a second record, so
callers may safely retry.
"""

from pathlib import PurePath
from typing import Optional
from loguru import logger
from ..models.invoice import Invoice, VerificationRecord
from .remark_locator import VIRTUAL_ACCOUNT_MARKER
from .storage.base import DuplicateRecordError, VerificationRecordStoreBase
from .storage.blob import BlobStoreBase
from .storage.filters import Equals, Filter


def bank_from_remark(remark: str) -> str:
    """Bank code is the remark text preceding the first "VA" marker"""
    return remark.split(VIRTUAL_ACCOUNT_MARKER, 1)[0]


def blob_key_for(invoice: Invoice, file_name: str) -> str:
    suffix = PurePath(file_name or "").suffix.lower()
    return f"invoices/{invoice.id}{suffix}"


class VerificationRecorder:
    def __init__(self, record_store: VerificationRecordStoreBase, blob_store: BlobStoreBase):
        self.record_store = record_store
        self.blob_store = blob_store

    def find_existing(self, remark: str, amount: float) -> Optional[VerificationRecord]:
        query = (
            Filter(VerificationRecord)
            .where("remark", Equals(remark))
            .where("amount", Equals(amount))
        )
        return self.record_store.find_one(query)

    def build_record(self, invoice: Invoice, file_name: str, file_url: str) -> VerificationRecord:
        return VerificationRecord(
            remark=invoice.remark,
            amount=invoice.amount,
            file_name=file_name,
            bank=bank_from_remark(invoice.remark),
            invoice_number=invoice.reference_number,
            file_url=file_url,
            invoice_id=invoice.id,
        )

    def record(
        self,
        invoice: Invoice,
        image_bytes: bytes,
        file_name: str,
        content_type: Optional[str] = None,
    ) -> VerificationRecord:
        """
        Record a verified payment for an invoice.

        Args:
            invoice: Invoice confirmed by remark and amount
            image_bytes: Payment advice image to archive
            file_name: Original upload file name
            content_type: MIME type stored with the blob (optional)

        Returns:
            The record payload; for an existing (remark, amount) the payload
            carries the file URL of the stored record
        """
        existing = self.find_existing(invoice.remark, invoice.amount)
        if existing is not None:
            logger.info(
                "Verification record already exists, skipping upload",
                remark=invoice.remark,
                amount=invoice.amount,
            )
            return self.build_record(invoice, file_name, existing.file_url)

        file_url = self.blob_store.upload(image_bytes, blob_key_for(invoice, file_name), content_type)
        record = self.build_record(invoice, file_name, file_url)

        try:
            self.record_store.insert(record)
        except DuplicateRecordError:
            # Lost a race with a concurrent verification of the same payment
            logger.warning(
                "Concurrent verification record detected",
                remark=invoice.remark,
                amount=invoice.amount,
            )
            stored = self.find_existing(invoice.remark, invoice.amount)
            if stored is not None:
                return self.build_record(invoice, file_name, stored.file_url)
            raise

        logger.info(
            "Verification record created",
            remark=record.remark,
            amount=record.amount,
            invoice_id=record.invoice_id,
        )
        return record


from loguru import logger
from ..models.invoice import Invoice, InvoiceStatus, InvoiceSummary, VerificationRecord
from .results import ServiceResult
from .storage.base import InvoiceStoreBase, VerificationRecordStoreBase
from .storage.filters import Equals, Filter, NotEqual


class StatusUpdater:
    """
    Marks every invoice sharing a reference number as paid, once the
    payment advice for the invoice's remark has been verified.

    Amounts are not re-checked here; the verification record is trusted.
    """

    def __init__(self, invoice_store: InvoiceStoreBase, record_store: VerificationRecordStoreBase):
        self.invoice_store = invoice_store
        self.record_store = record_store

    def mark_paid(self, invoice_number: str) -> ServiceResult:
        try:
            invoice = self.invoice_store.find_one(
                Filter(Invoice).where("invoice_number", Equals(invoice_number))
            )
            if invoice is None:
                return ServiceResult.not_found("Invoice not found")

            reference_number = invoice.reference_number

            verified = self.record_store.find_one(
                Filter(VerificationRecord).where("remark", Equals(invoice.remark))
            )
            if verified is None:
                logger.info(
                    "No verification record for remark",
                    invoice_number=invoice_number,
                    remark=invoice.remark,
                )
                return ServiceResult.not_found(
                    "Remark not found in verification records, cannot update invoice status"
                )

            result = self.invoice_store.update_many(
                Filter(Invoice)
                .where("reference_number", Equals(reference_number))
                .where("status", NotEqual(InvoiceStatus.PAID)),
                {"status": InvoiceStatus.PAID},
            )

            if result.modified_count == 0:
                return ServiceResult.no_op(
                    "All invoices already have the status paid",
                    data={"matched_count": result.matched_count, "modified_count": result.modified_count},
                )

            paid = self.invoice_store.find(
                Filter(Invoice)
                .where("reference_number", Equals(reference_number))
                .where("status", Equals(InvoiceStatus.PAID))
            )

            logger.info(
                "Invoices marked paid",
                reference_number=reference_number,
                matched=result.matched_count,
                modified=result.modified_count,
            )

            return ServiceResult.ok(
                f"{result.modified_count} invoice(s) updated to paid successfully.",
                data={
                    "total_matched_invoices": result.matched_count,
                    "total_updated_invoices": result.modified_count,
                    "updated_invoices": [
                        InvoiceSummary.from_invoice(inv).model_dump(mode="json") for inv in paid
                    ],
                },
            )

        except Exception as e:
            logger.exception(f"Invoice status update failed: {str(e)}")
            return ServiceResult.fault(e)

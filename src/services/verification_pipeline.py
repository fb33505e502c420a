"""
Payment advice verification pipeline.

OCR -> remark location -> candidate lookup -> amount match -> record.
Each stage short-circuits on its terminal outcome; any exception is a fault
reported at this boundary. Nothing is retried here.
"""

from datetime import date
from typing import Optional, Protocol, Sequence
from loguru import logger
from .amount_matcher import match_amount
from .candidate_finder import CandidateFinder
from .ocr import OcrError, create_text_detector
from .ocr_types import TextAnnotation
from .remark_locator import locate_remark
from .results import ServiceResult
from .storage.base import InvoiceStoreBase, VerificationRecordStoreBase
from .storage.blob import BlobStoreBase
from .verification_recorder import VerificationRecorder


class TextDetector(Protocol):
    def detect_text(self, image_bytes: bytes) -> Sequence[TextAnnotation]:
        ...


class VerificationPipeline:
    def __init__(
        self,
        account_number: Optional[str],
        text_detector: Optional[TextDetector],
        invoice_store: InvoiceStoreBase,
        record_store: VerificationRecordStoreBase,
        blob_store: BlobStoreBase,
    ):
        self.account_number = account_number
        self.text_detector = text_detector
        self.candidate_finder = CandidateFinder(invoice_store)
        self.recorder = VerificationRecorder(record_store, blob_store)

    def verify_file(
        self,
        image_bytes: bytes,
        file_name: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        content_type: Optional[str] = None,
    ) -> ServiceResult:
        """
        Match a payment advice image to an outstanding invoice.

        Args:
            image_bytes: Uploaded image content
            file_name: Original file name (stored on the verification record)
            start_date: Earliest invoice value date to consider (optional)
            end_date: Latest invoice value date to consider, inclusive (optional)
            content_type: MIME type of the upload (optional)

        Returns:
            ServiceResult; on success data is the VerificationRecord
        """
        try:
            if not self.account_number:
                raise ValueError("ACCOUNT_NUMBER is not configured")
            if self.text_detector is None:
                raise OcrError(
                    "Azure Document Intelligence not configured. "
                    "Set AZ_DI_ENDPOINT and AZ_DI_API_KEY to enable text detection."
                )

            annotations = list(self.text_detector.detect_text(image_bytes))
            if not annotations:
                return ServiceResult.no_text("No text found in the image.")

            remark = locate_remark(annotations, self.account_number)
            if remark is None:
                logger.info("No payment remark found in image", file_name=file_name)
                return ServiceResult.not_found("Invoice not found")

            candidates = self.candidate_finder.find_candidates(remark, start_date, end_date)
            if not candidates:
                return ServiceResult.not_found("Invoice not found")

            invoice = match_amount(candidates, annotations)
            if invoice is None:
                logger.info("No candidate amount found in image", remark=remark, candidates=len(candidates))
                return ServiceResult.no_match("No matching invoice was found")

            record = self.recorder.record(invoice, image_bytes, file_name, content_type)
            return ServiceResult.ok("Data Verified", data=record)

        except Exception as e:
            logger.exception(f"Payment advice verification failed: {str(e)}")
            return ServiceResult.fault(e)


def create_verification_pipeline(
    settings,
    invoice_store: InvoiceStoreBase,
    record_store: VerificationRecordStoreBase,
    blob_store: BlobStoreBase,
    text_detector: Optional[TextDetector] = None,
) -> VerificationPipeline:
    """
    Factory building the pipeline once from explicit settings.

    A missing OCR configuration does not fail construction; each
    verification then reports a fault instead.
    """
    if text_detector is None:
        try:
            text_detector = create_text_detector(settings)
        except OcrError as e:
            logger.warning(str(e))

    return VerificationPipeline(
        account_number=settings.account_number,
        text_detector=text_detector,
        invoice_store=invoice_store,
        record_store=record_store,
        blob_store=blob_store,
    )

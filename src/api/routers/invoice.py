from datetime import date, datetime
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import JSONResponse
from loguru import logger
from ..deps import get_event_publisher, get_invoice_store, get_pipeline, get_status_updater
from ...services.candidate_finder import list_unpaid_invoices
from ...services.events.event_publisher import EventPublisher, InvoicesPaidEvent, PaymentVerifiedEvent
from ...services.results import ServiceResult
from ...services.status_updater import StatusUpdater
from ...services.storage import InvoiceStoreBase
from ...services.verification_pipeline import VerificationPipeline

router = APIRouter(prefix="/invoices", tags=["invoices"])


def to_json_response(result: ServiceResult) -> JSONResponse:
    # A 304 response cannot carry a body; the envelope still reports 304
    http_status = result.status_code
    if http_status == status.HTTP_304_NOT_MODIFIED:
        http_status = status.HTTP_200_OK
    return JSONResponse(status_code=http_status, content=result.to_response())


@router.post("/verification")
async def verify_payment_advice(
    file: UploadFile = File(...),
    start_date: datetime | date | None = Form(None),
    end_date: datetime | date | None = Form(None),
    pipeline: VerificationPipeline = Depends(get_pipeline),
    publisher: EventPublisher = Depends(get_event_publisher),
):
    """
    Match an uploaded payment advice image to an outstanding invoice.

    Multipart form fields:
    - file: the payment advice image
    - start_date / end_date: optional ISO dates (or datetimes, truncated to
      the day) limiting invoice value dates

    Example response:
    {
        "statusCode": 200,
        "success": true,
        "message": "Data Verified",
        "data": {"remark": "BCA VA9988", "amount": 500.0, "bank": "BCA ", ...}
    }
    """
    content = await file.read()
    logger.info(
        "Verification request received",
        file_name=file.filename,
        size_bytes=len(content),
        start_date=str(start_date) if start_date else None,
        end_date=str(end_date) if end_date else None,
    )

    result = pipeline.verify_file(
        content,
        file.filename or "upload",
        start_date=start_date,
        end_date=end_date,
        content_type=file.content_type,
    )

    if result.success:
        # Don't fail verification if event publishing fails
        try:
            record = result.data
            publisher.publish(PaymentVerifiedEvent(
                invoice_id=record.invoice_id,
                invoice_number=record.invoice_number,
                remark=record.remark,
                amount=record.amount,
                bank=record.bank,
                file_url=record.file_url,
            ))
        except Exception as e:
            logger.warning(f"Failed to publish event: {e}")

    return to_json_response(result)


@router.get("")
async def list_invoices(
    remark: str | None = None,
    invoice_store: InvoiceStoreBase = Depends(get_invoice_store),
):
    """List unpaid invoices, optionally those with an exact remark"""
    invoices = list_unpaid_invoices(invoice_store, remark)
    if not invoices:
        return to_json_response(ServiceResult.not_found("No invoice found"))
    return to_json_response(ServiceResult.ok(
        "Success",
        data=[inv.model_dump(mode="json") for inv in invoices],
    ))


@router.patch("/{invoice_number}/status")
async def mark_invoices_paid(
    invoice_number: str,
    updater: StatusUpdater = Depends(get_status_updater),
    publisher: EventPublisher = Depends(get_event_publisher),
):
    """Mark every invoice sharing this invoice's reference number as paid"""
    result = updater.mark_paid(invoice_number)

    if result.success:
        try:
            updated = result.data["updated_invoices"]
            publisher.publish(InvoicesPaidEvent(
                reference_number=updated[0]["reference_number"] if updated else "",
                invoice_numbers=[inv["invoice_number"] for inv in updated],
                updated_count=result.data["total_updated_invoices"],
            ))
        except Exception as e:
            logger.warning(f"Failed to publish event: {e}")

    return to_json_response(result)

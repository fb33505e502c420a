"""
FastAPI dependency providers.

Stores, the pipeline and the event publisher are built once from settings.
Tests swap them with app.dependency_overrides.
"""

from functools import lru_cache
from fastapi import Depends
from ..core.config import settings
from ..services.events.event_publisher import EventPublisher, create_event_publisher
from ..services.status_updater import StatusUpdater
from ..services.storage import (
    AzureBlobStore,
    BlobStoreBase,
    InvoiceStoreBase,
    LocalBlobStore,
    SQLiteInvoiceStore,
    SQLiteVerificationRecordStore,
    VerificationRecordStoreBase,
)
from ..services.verification_pipeline import VerificationPipeline, create_verification_pipeline


@lru_cache
def get_invoice_store() -> InvoiceStoreBase:
    return SQLiteInvoiceStore(settings.database_path)


@lru_cache
def get_record_store() -> VerificationRecordStoreBase:
    return SQLiteVerificationRecordStore(settings.database_path)


@lru_cache
def get_blob_store() -> BlobStoreBase:
    if settings.az_storage_connection_string:
        return AzureBlobStore.from_connection_string(
            settings.az_storage_connection_string,
            settings.az_storage_container,
            timeout_seconds=settings.storage_timeout_seconds,
        )
    return LocalBlobStore(settings.local_upload_dir)


@lru_cache
def get_pipeline() -> VerificationPipeline:
    return create_verification_pipeline(
        settings,
        invoice_store=get_invoice_store(),
        record_store=get_record_store(),
        blob_store=get_blob_store(),
    )


def get_status_updater(
    invoice_store: InvoiceStoreBase = Depends(get_invoice_store),
    record_store: VerificationRecordStoreBase = Depends(get_record_store),
) -> StatusUpdater:
    return StatusUpdater(invoice_store, record_store)


@lru_cache
def get_event_publisher() -> EventPublisher:
    return create_event_publisher(settings)

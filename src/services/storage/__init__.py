from .base import (
    DuplicateRecordError,
    InvoiceStoreBase,
    UpdateResult,
    VerificationRecordStoreBase,
)
from .blob import AzureBlobStore, BlobStoreBase, LocalBlobStore
from .filters import Contains, Equals, Filter, NotEqual, Range
from .memory import InMemoryInvoiceStore, InMemoryVerificationRecordStore
from .sqlite import SQLiteInvoiceStore, SQLiteVerificationRecordStore

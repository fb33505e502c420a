"""
Pytest configuration and shared fixtures.

Registers the integration marker and provides in-memory stores plus a fake
text detector so pipeline tests run without Azure resources.
"""

from datetime import datetime, UTC
import pytest
from src.models.invoice import Invoice
from src.services.ocr_types import TextAnnotation
from src.services.storage import (
    BlobStoreBase,
    InMemoryInvoiceStore,
    InMemoryVerificationRecordStore,
)


def pytest_addoption(parser):
    """Add custom command-line options"""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests against real Azure resources"
    )


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test requiring real Azure resources"
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --run-integration is specified"""
    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="need --run-integration option to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


def annotations(*texts):
    """Build an OCR annotation list from plain strings"""
    return [TextAnnotation(text=t) for t in texts]


def make_invoice(**overrides) -> Invoice:
    data = {
        "id": "inv-1",
        "remark": "BCA VA9988",
        "amount": 500,
        "value_date": datetime(2025, 3, 10, 9, 30, tzinfo=UTC),
        "reference_number": "REF-001",
        "invoice_number": "INV-001",
        "invoice_date": datetime(2025, 3, 1, tzinfo=UTC),
    }
    data.update(overrides)
    return Invoice(**data)


class FakeTextDetector:
    """Returns canned annotations and remembers what it was asked to read"""

    def __init__(self, texts=(), error: Exception | None = None):
        self.texts = list(texts)
        self.error = error
        self.calls = []

    def detect_text(self, image_bytes: bytes):
        self.calls.append(image_bytes)
        if self.error is not None:
            raise self.error
        return annotations(*self.texts)


class RecordingBlobStore(BlobStoreBase):
    def __init__(self, error: Exception | None = None):
        self.uploads = []
        self.error = error

    def upload(self, data: bytes, key: str, content_type=None) -> str:
        if self.error is not None:
            raise self.error
        self.uploads.append((key, data, content_type))
        return f"https://blobs.example.com/payment-advice/{key}"


@pytest.fixture
def invoice_store():
    return InMemoryInvoiceStore()


@pytest.fixture
def record_store():
    return InMemoryVerificationRecordStore()


@pytest.fixture
def blob_store():
    return RecordingBlobStore()

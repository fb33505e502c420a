"""
Tests for payment advice blob storage.
"""

from pathlib import Path
from unittest.mock import Mock
import pytest
from src.services.storage.blob import AzureBlobStore, LocalBlobStore


def test_local_store_writes_file_and_returns_uri(tmp_path):
    store = LocalBlobStore(str(tmp_path))

    url = store.upload(b"image", "invoices/inv-1.png", "image/png")

    assert (tmp_path / "invoices" / "inv-1.png").read_bytes() == b"image"
    assert url.startswith("file://")
    assert url.endswith("/invoices/inv-1.png")


@pytest.mark.parametrize("key", ["../escape.png", "/etc/passwd", "invoices/../../x"])
def test_local_store_rejects_keys_outside_root(tmp_path, key):
    with pytest.raises(ValueError):
        LocalBlobStore(str(tmp_path)).upload(b"x", key)


def test_azure_store_uploads_with_overwrite_and_timeout():
    container = Mock()
    container.upload_blob.return_value.url = "https://acct.blob.core.windows.net/payment-advice/invoices/inv-1.png"
    store = AzureBlobStore(container, timeout_seconds=7)

    url = store.upload(b"image", "invoices/inv-1.png", "image/png")

    assert url == "https://acct.blob.core.windows.net/payment-advice/invoices/inv-1.png"
    kwargs = container.upload_blob.call_args.kwargs
    assert kwargs["name"] == "invoices/inv-1.png"
    assert kwargs["data"] == b"image"
    assert kwargs["overwrite"] is True
    assert kwargs["timeout"] == 7
    assert kwargs["content_settings"].content_type == "image/png"


def test_azure_store_propagates_upload_errors():
    container = Mock()
    container.upload_blob.side_effect = ConnectionError("storage unreachable")

    with pytest.raises(ConnectionError):
        AzureBlobStore(container).upload(b"image", "invoices/inv-1.png")

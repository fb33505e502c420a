"""
Tests for Azure Document Intelligence text detection.

The Azure client is mocked; see test_integration_ocr.py for real calls.
"""

from types import SimpleNamespace
from unittest.mock import Mock
import pytest
from azure.core.exceptions import HttpResponseError
from src.services.ocr import AzureTextDetector, OcrError, create_text_detector


def analyze_result(content, pages):
    return SimpleNamespace(
        content=content,
        pages=[
            SimpleNamespace(words=[
                SimpleNamespace(content=w, confidence=0.99, polygon=[0, 0, 1, 0, 1, 1, 0, 1])
                for w in words
            ])
            for words in pages
        ],
    )


def detector_returning(result):
    client = Mock()
    client.begin_analyze_document.return_value.result.return_value = result
    return AzureTextDetector(endpoint="https://x", api_key="k", client=client, timeout_seconds=5), client


def test_detect_text_puts_full_content_first_then_words():
    detector, client = detector_returning(
        analyze_result("INV123 VA9988\n500", [["INV123", "VA9988"], ["500"]])
    )

    annotations = detector.detect_text(b"image")

    assert [a.text for a in annotations] == ["INV123 VA9988\n500", "INV123", "VA9988", "500"]
    assert annotations[1].confidence == 0.99
    assert annotations[1].polygon == [0, 0, 1, 0, 1, 1, 0, 1]
    client.begin_analyze_document.assert_called_once_with(
        "prebuilt-read", body=b"image", content_type="application/octet-stream"
    )
    client.begin_analyze_document.return_value.result.assert_called_once_with(timeout=5)


def test_detect_text_empty_document_returns_no_annotations():
    detector, _ = detector_returning(analyze_result("", []))
    assert detector.detect_text(b"blank") == []


def test_detect_text_wraps_azure_errors():
    client = Mock()
    client.begin_analyze_document.side_effect = HttpResponseError(message="Access denied due to invalid subscription key")
    detector = AzureTextDetector(endpoint="https://x", api_key="bad", client=client)

    with pytest.raises(OcrError, match="invalid subscription key"):
        detector.detect_text(b"image")


def test_create_text_detector_requires_configuration():
    settings = SimpleNamespace(az_di_endpoint=None, az_di_api_key=None)
    with pytest.raises(OcrError, match="not configured"):
        create_text_detector(settings)


def test_create_text_detector_from_settings():
    settings = SimpleNamespace(
        az_di_endpoint="https://example.cognitiveservices.azure.com/",
        az_di_api_key="secret",
        az_di_model="prebuilt-read",
        ocr_timeout_seconds=12.0,
    )

    detector = create_text_detector(settings)

    assert detector.model_id == "prebuilt-read"
    assert detector.timeout_seconds == 12.0

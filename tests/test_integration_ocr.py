"""
Integration tests running real payment advice images through Azure
Document Intelligence.

These tests require Azure Document Intelligence to be configured:
- Set AZ_DI_ENDPOINT in .env
- Set AZ_DI_API_KEY in .env
- Set ACCOUNT_NUMBER to the virtual-account digits printed on the samples

If not configured, tests will be skipped.
"""

import pytest
from pathlib import Path
from src.core.config import settings
from src.services.ocr import create_text_detector
from src.services.remark_locator import locate_remark

AZURE_DI_CONFIGURED = bool(settings.az_di_endpoint and settings.az_di_api_key and settings.account_number)
skip_if_no_azure_di = pytest.mark.skipif(
    not AZURE_DI_CONFIGURED,
    reason="Azure Document Intelligence not configured (set AZ_DI_ENDPOINT, AZ_DI_API_KEY and ACCOUNT_NUMBER)",
)

SAMPLES_DIR = Path(__file__).parent.parent / "samples" / "payment_advice"


@skip_if_no_azure_di
@pytest.mark.integration
def test_real_payment_advice_contains_remark():
    samples = sorted(SAMPLES_DIR.glob("*.png")) + sorted(SAMPLES_DIR.glob("*.jpg"))
    if not samples:
        pytest.skip(f"No sample images found in {SAMPLES_DIR}")

    detector = create_text_detector(settings)

    for sample in samples:
        annotations = detector.detect_text(sample.read_bytes())
        assert annotations, f"No text detected in {sample.name}"
        assert locate_remark(annotations, settings.account_number), f"No remark found in {sample.name}"

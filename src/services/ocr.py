
from loguru import logger
from azure.ai.documentintelligence import DocumentIntelligenceClient
from azure.core.credentials import AzureKeyCredential
from .ocr_types import TextAnnotation


class OcrError(Exception):
    """Raised when text detection cannot be performed."""


class AzureTextDetector:
    """
    Text detection backed by the Azure Document Intelligence read model.

    detect_text returns the annotation list the matching pipeline expects:
    index 0 is the full detected text block, followed by every word on
    every page in reading order.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        model_id: str = "prebuilt-read",
        timeout_seconds: float = 60.0,
        client: DocumentIntelligenceClient | None = None,
    ):
        self.model_id = model_id
        self.timeout_seconds = timeout_seconds
        self.client = client or DocumentIntelligenceClient(
            endpoint=endpoint,
            credential=AzureKeyCredential(api_key),
            connection_timeout=timeout_seconds,
            read_timeout=timeout_seconds,
        )

    def detect_text(self, image_bytes: bytes) -> list[TextAnnotation]:
        logger.info(f"Detecting text in image of size {len(image_bytes)} bytes", model=self.model_id)

        try:
            poller = self.client.begin_analyze_document(
                self.model_id,
                body=image_bytes,
                content_type="application/octet-stream"
            )
            result = poller.result(timeout=self.timeout_seconds)
        except Exception as e:
            logger.error(f"Azure DI text detection failed: {str(e)}")
            raise OcrError(f"Text detection failed: {str(e)}") from e

        content = getattr(result, "content", None) or ""
        if not content.strip():
            logger.warning("No text detected in image")
            return []

        annotations = [TextAnnotation(text=content)]
        for page in getattr(result, "pages", None) or []:
            for word in getattr(page, "words", None) or []:
                if not word.content:
                    continue
                annotations.append(
                    TextAnnotation(
                        text=word.content,
                        confidence=getattr(word, "confidence", None),
                        polygon=list(word.polygon) if getattr(word, "polygon", None) else None,
                    )
                )

        logger.info("Text detection complete", annotations=len(annotations))
        return annotations


def create_text_detector(settings) -> AzureTextDetector:
    """
    Build the text detector from settings.

    Raises:
        OcrError: if Azure Document Intelligence is not configured
    """
    if not (settings.az_di_endpoint and settings.az_di_api_key):
        raise OcrError(
            "Azure Document Intelligence not configured. "
            "Set AZ_DI_ENDPOINT and AZ_DI_API_KEY to enable text detection."
        )

    logger.info(
        "Using Azure Document Intelligence for text detection",
        endpoint=settings.az_di_endpoint[:50] + "..." if len(settings.az_di_endpoint) > 50 else settings.az_di_endpoint
    )
    return AzureTextDetector(
        endpoint=settings.az_di_endpoint,
        api_key=settings.az_di_api_key,
        model_id=settings.az_di_model,
        timeout_seconds=settings.ocr_timeout_seconds,
    )


from typing import Sequence
from loguru import logger
from .ocr_types import TextAnnotation
from .text_normalizer import normalize

VIRTUAL_ACCOUNT_MARKER = "VA"


def locate_remark(annotations: Sequence[TextAnnotation], account_number: str) -> str | None:
    """
    Find the payment remark among OCR annotations.

    The remark is the first fragment after the whole-image block (index 0)
    whose digits contain the account number and whose raw text contains the
    "VA" marker. Index 0 is never selected.

    Returns:
        The fragment's original text, or None if no fragment qualifies
    """
    if not account_number:
        raise ValueError("account_number must be a non-empty digit string")

    for index, annotation in enumerate(annotations):
        if index == 0:
            continue
        text = annotation.text
        if account_number in normalize(text) and VIRTUAL_ACCOUNT_MARKER in text:
            logger.debug("Located payment remark", index=index, remark=text)
            return text

    return None

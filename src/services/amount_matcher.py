
from typing import Optional, Sequence
from loguru import logger
from ..models.invoice import Invoice
from .ocr_types import TextAnnotation
from .text_normalizer import amount_to_digits, normalize

# OCR often renders the cents of a whole amount as two extra digits
# ("500.00" -> "50000"), so the amount followed by "00" also matches.
CENTS_SUFFIX = "00"


def amount_matches(amount: float, text: str) -> bool:
    digits = normalize(text)
    expected = amount_to_digits(amount)
    return digits == expected or digits == expected + CENTS_SUFFIX


def match_amount(
    candidates: Sequence[Invoice],
    annotations: Sequence[TextAnnotation],
) -> Optional[Invoice]:
    """
    Return the first candidate, in list order, whose amount appears in any
    annotation after the whole-image block.

    The outer loop is over candidates and the inner check over annotations,
    so an earlier candidate wins even if a later candidate's amount appears
    earlier in the OCR output.
    """
    words = [a.text for a in annotations[1:]]
    for candidate in candidates:
        if any(amount_matches(candidate.amount, text) for text in words):
            logger.info(
                "Amount matched",
                invoice_id=candidate.id,
                amount=candidate.amount,
            )
            return candidate
    return None


import re

_NON_DIGITS = re.compile(r"[^0-9]")


def normalize(text: str) -> str:
    """Keep only the ASCII decimal digits of text, in their original order."""
    return _NON_DIGITS.sub("", text or "")


def amount_to_digits(amount: float) -> str:
    """
    Render an invoice amount for comparison against normalized OCR text.

    Whole amounts drop the fractional part (500.0 -> "500"). Other amounts
    keep their decimal point, so they never equal a digit-only string.
    """
    if float(amount).is_integer():
        return str(int(amount))
    return repr(float(amount))

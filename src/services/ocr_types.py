
from pydantic import BaseModel

class TextAnnotation(BaseModel):
    text: str
    confidence: float | None = None
    polygon: list[float] | None = None  # Page coordinates from the OCR engine

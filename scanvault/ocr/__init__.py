"""OCR capability: model backends, page decoding and the model registry."""

from .models import OCRModel, TesseractModel, TrOCRModel, load_model
from .pages import PageLoader
from .registry import ModelRegistry, ModelState

__all__ = [
    "ModelRegistry",
    "ModelState",
    "OCRModel",
    "PageLoader",
    "TesseractModel",
    "TrOCRModel",
    "load_model",
]

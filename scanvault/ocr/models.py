"""OCR model backends.

A model is anything with an ``infer(image) -> str`` method. Two backends are
available: Tesseract through pytesseract, and a TrOCR vision encoder-decoder
from Hugging Face transformers.
"""

from typing import Protocol

import pytesseract
import torch
from PIL import Image
from transformers import TrOCRProcessor, VisionEncoderDecoderModel

from scanvault.errors import ModelLoadError
from scanvault.utils.config import ModelConfig
from scanvault.utils.logger import get_logger

logger = get_logger(__name__)


class OCRModel(Protocol):
    """A loaded text recognition capability."""

    name: str

    def infer(self, image: Image.Image) -> str: ...


class TesseractModel:
    """Tesseract OCR engine.

    Args:
        tesseract_cmd: Path to the Tesseract executable.
            If ``None``, uses the system default.
        lang: OCR language code.
        psm: Tesseract page segmentation mode.
    """

    def __init__(
        self,
        tesseract_cmd: str | None = None,
        lang: str = "eng",
        psm: int = 3,
    ) -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self.lang = lang
        self.psm = psm
        self.version = str(pytesseract.get_tesseract_version())
        self.name = f"tesseract-{self.version}"
        logger.info("Tesseract %s ready (lang=%s, psm=%d)", self.version, lang, psm)

    def infer(self, image: Image.Image) -> str:
        return pytesseract.image_to_string(
            image, lang=self.lang, config=f"--psm {self.psm}"
        )


class TrOCRModel:
    """Transformer OCR using a pre-trained TrOCR checkpoint.

    Args:
        model_name: Hugging Face model identifier.
        device: Torch device (``"cuda"`` or ``"cpu"``). Auto-detected if ``None``.
        max_new_tokens: Upper bound on generated tokens per page.
    """

    def __init__(
        self,
        model_name: str = "microsoft/trocr-base-printed",
        device: str | None = None,
        max_new_tokens: int = 256,
    ) -> None:
        self.device = device or ("cuda" if torch.cuda.is_available() else "cpu")
        self.name = model_name
        self.max_new_tokens = max_new_tokens

        logger.info("Loading TrOCR model: %s on %s", model_name, self.device)
        self.processor = TrOCRProcessor.from_pretrained(model_name)
        self.model = VisionEncoderDecoderModel.from_pretrained(model_name).to(
            self.device
        )
        self.model.eval()

    def infer(self, image: Image.Image) -> str:
        pixel_values = self.processor(
            images=image.convert("RGB"), return_tensors="pt"
        ).pixel_values.to(self.device)
        with torch.no_grad():
            generated = self.model.generate(
                pixel_values, max_new_tokens=self.max_new_tokens
            )
        return self.processor.batch_decode(generated, skip_special_tokens=True)[0]


def load_model(config: ModelConfig) -> OCRModel:
    """Build the OCR model selected by ``config.backend``.

    Raises:
        ModelLoadError: If the engine binary or model weights are unavailable.
    """
    try:
        if config.backend == "trocr":
            return TrOCRModel(config.model_name, device=config.device)
        return TesseractModel(config.tesseract_cmd, lang=config.lang, psm=config.psm)
    except Exception as exc:
        logger.error("Failed to load %s OCR model: %s", config.backend, exc)
        raise ModelLoadError() from exc

"""Decoding of uploaded scan bytes into page images.

Scans arrive either as a raster image (possibly a multi-frame TIFF) or as a
PDF, which is rendered one image per page.
"""

import io

from pdf2image import convert_from_bytes
from PIL import Image, ImageSequence

from scanvault.utils.logger import get_logger

logger = get_logger(__name__)

PDF_MAGIC = b"%PDF"


class PageLoader:
    """Turns raw scan bytes into a list of PIL images.

    Args:
        dpi: Resolution for PDF rendering. Higher values produce
            better OCR results but use more memory.
    """

    def __init__(self, dpi: int = 300) -> None:
        self.dpi = dpi

    def load(self, data: bytes) -> list[Image.Image]:
        """Decode ``data`` into page images.

        Raises:
            RuntimeError: If a PDF cannot be rendered.
            PIL.UnidentifiedImageError: If the bytes are not a known image format.
        """
        if data[:4] == PDF_MAGIC:
            return self._pdf_pages(data)

        image = Image.open(io.BytesIO(data))
        pages = [frame.copy() for frame in ImageSequence.Iterator(image)]
        logger.debug("Decoded %s image with %d frame(s)", image.format, len(pages))
        return pages

    def _pdf_pages(self, data: bytes) -> list[Image.Image]:
        try:
            pages = convert_from_bytes(data, dpi=self.dpi)
        except Exception as exc:
            raise RuntimeError(f"PDF conversion failed: {exc}") from exc
        logger.info("Converted PDF to %d images at %d DPI", len(pages), self.dpi)
        return pages

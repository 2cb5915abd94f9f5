# chart_reader/ocr.py
from __future__ import annotations
import logging
from typing import List, Optional

import pytesseract
from PIL import Image

from .errors import OcrEngineError
from .words import BBox, OcrWord

logger = logging.getLogger("chart_reader.ocr")

WORD_LEVEL = 5   # image_to_data rows: 1 page, 2 block, 3 paragraph, 4 line, 5 word


class TesseractOcr:
    """Full-page Tesseract OCR returning word boxes in image pixels."""

    def __init__(self, lang: str = "eng", psm: int = 3, min_confidence: float = 0.0,
                 tesseract_cmd: Optional[str] = None):
        self.lang = lang
        self.psm = psm
        self.min_confidence = min_confidence
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    @classmethod
    def from_settings(cls, s) -> "TesseractOcr":
        return cls(lang=s.ocr_lang, psm=s.ocr_psm, min_confidence=s.ocr_min_confidence,
                   tesseract_cmd=s.tesseract_cmd)

    def recognize(self, img: Image.Image) -> List[OcrWord]:
        config = f"--psm {self.psm}"
        logger.info("Running Tesseract (lang=%s, %s) on %dx%d image", self.lang, config, *img.size)
        try:
            data = pytesseract.image_to_data(
                img, lang=self.lang, config=config, output_type=pytesseract.Output.DICT
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError, OSError) as e:
            raise OcrEngineError(f"Tesseract failed: {e}") from e
        return words_from_tesseract(data, self.min_confidence)


def words_from_tesseract(data: dict, min_confidence: float = 0.0) -> List[OcrWord]:
    """Word-level rows of an image_to_data DICT as OcrWords, in reading order."""
    words: List[OcrWord] = []
    for i in range(len(data["text"])):
        if "level" in data and int(data["level"][i]) != WORD_LEVEL:
            continue
        text = (data["text"][i] or "").strip()
        conf = float(data["conf"][i])
        if not text or conf < min_confidence:
            continue
        left, top = int(data["left"][i]), int(data["top"][i])
        width, height = int(data["width"][i]), int(data["height"][i])
        words.append(OcrWord(
            text=text,
            bbox=BBox(left, top, left + width, top + height),
            confidence=conf,
        ))
    logger.debug("Tesseract returned %d word(s)", len(words))
    return words

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv, find_dotenv
load_dotenv(find_dotenv(filename=".env", usecwd=True))


@dataclass(frozen=True)
class Settings:
    # geometry, in pixels at the document's native resolution
    month_row_tolerance: float = 10.0
    y_axis_tolerance: float = 30.0
    legend_radius: float = 300.0
    unit_radius: float = 100.0
    title_band: float = 80.0
    min_months: int = 4
    # pixel classification
    dark_threshold: int = 240
    # collaborators
    ocr_lang: str = "eng"
    ocr_psm: int = 3
    ocr_min_confidence: float = 0.0
    tesseract_cmd: Optional[str] = None
    pdf_dpi: int = 144
    log_level: str = "INFO"
    output_dir: str = "./out"


DEFAULT_SETTINGS = Settings()


def load_settings() -> Settings:
    invalid = []
    def num(k, default, cast):
        v = os.getenv(k)
        if v is None or v == "":
            return default
        try:
            return cast(v)
        except ValueError:
            invalid.append(k)
            return default
    d = DEFAULT_SETTINGS
    s = Settings(
        month_row_tolerance = num("CHART_MONTH_ROW_TOLERANCE", d.month_row_tolerance, float),
        y_axis_tolerance = num("CHART_Y_AXIS_TOLERANCE", d.y_axis_tolerance, float),
        legend_radius = num("CHART_LEGEND_RADIUS", d.legend_radius, float),
        unit_radius = num("CHART_UNIT_RADIUS", d.unit_radius, float),
        title_band = num("CHART_TITLE_BAND", d.title_band, float),
        min_months = num("CHART_MIN_MONTHS", d.min_months, int),
        dark_threshold = num("CHART_DARK_THRESHOLD", d.dark_threshold, int),
        ocr_lang = os.getenv("OCR_LANG", d.ocr_lang),
        ocr_psm = num("OCR_PSM", d.ocr_psm, int),
        ocr_min_confidence = num("OCR_MIN_CONFIDENCE", d.ocr_min_confidence, float),
        tesseract_cmd = os.getenv("TESSERACT_CMD") or None,
        pdf_dpi = num("PDF_DPI", d.pdf_dpi, int),
        log_level = os.getenv("LOG_LEVEL", d.log_level).upper(),
        output_dir = os.getenv("OUTPUT_DIR", d.output_dir),
    )
    if invalid:
        raise RuntimeError(f"Invalid numeric env vars: {', '.join(invalid)}")
    Path(s.output_dir).mkdir(parents=True, exist_ok=True)
    return s

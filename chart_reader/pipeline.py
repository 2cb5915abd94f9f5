# chart_reader/pipeline.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Tuple, Union

import numpy as np
from PIL import Image

from .assemble import UsageChartData, assemble_chart
from .calibrate import AxisCalibration, calibrate_axis
from .candidates import ChartCandidate
from .config import DEFAULT_SETTINGS, Settings
from .errors import ChartReaderError, InsufficientAxisData, ScanFailure
from .finder import find_chart_candidates
from .loader import load_image
from .logging_config import LogSink, resolve_sink
from .ocr import TesseractOcr
from .raster import Raster
from .scan import BarReading, scan_candidate
from .words import OcrWord


class OcrEngine(Protocol):
    def recognize(self, img: Image.Image) -> List[OcrWord]: ...


@dataclass(frozen=True)
class CandidateOutcome:
    """Result-or-failure of measuring one candidate."""
    candidate: ChartCandidate
    chart: Optional[UsageChartData] = None
    calibration: Optional[AxisCalibration] = None
    readings: Tuple[BarReading, ...] = ()
    error: Optional[ChartReaderError] = None

    @property
    def ok(self) -> bool:
        return self.chart is not None


def process_candidate(raster: Raster, candidate: ChartCandidate, sink: Optional[LogSink] = None) -> CandidateOutcome:
    emit = resolve_sink(sink)
    try:
        calibration = calibrate_axis(candidate.y_axis)
    except InsufficientAxisData as e:
        emit("ERROR", f"Chart {candidate.id} has insufficient Y-axis labels.", e)
        return CandidateOutcome(candidate=candidate, error=e)
    emit("DEBUG", f"Chart {candidate.id} Y-axis scale calculated", calibration.to_public())

    try:
        readings = scan_candidate(raster, candidate, calibration, sink=emit)
        chart = assemble_chart(candidate, readings)
    except Exception as e:
        # contained to this candidate
        err = ScanFailure(candidate.id, e)
        emit("ERROR", f"Failed to process chart candidate {candidate.id}", err)
        return CandidateOutcome(candidate=candidate, calibration=calibration, error=err)

    return CandidateOutcome(candidate=candidate, chart=chart, calibration=calibration,
                            readings=tuple(readings))


def analyze_words(
    raster: Raster,
    words: Sequence[OcrWord],
    settings: Optional[Settings] = None,
    sink: Optional[LogSink] = None,
) -> List[CandidateOutcome]:
    """One outcome per discovered candidate, in discovery order."""
    emit = resolve_sink(sink)
    candidates = find_chart_candidates(words, settings, sink=emit)
    if not candidates:
        emit("INFO", "No chart candidates found on the page.")
        return []
    return [process_candidate(raster, c, sink=emit) for c in candidates]


def successful_charts(outcomes: Sequence[CandidateOutcome]) -> List[UsageChartData]:
    return [o.chart for o in outcomes if o.chart is not None]


def extract_usage_charts(
    image: Union[Raster, Image.Image, np.ndarray],
    words: Sequence[OcrWord],
    settings: Optional[Settings] = None,
    sink: Optional[LogSink] = None,
) -> List[UsageChartData]:
    s = settings or DEFAULT_SETTINGS
    emit = resolve_sink(sink)
    raster = to_raster(image, s.dark_threshold)
    charts = successful_charts(analyze_words(raster, words, s, sink=emit))
    emit("INFO", f"Programmatic chart analysis finished. Extracted {len(charts)} chart(s).",
         [c.to_public() for c in charts])
    return charts


def to_raster(image: Union[Raster, Image.Image, np.ndarray], dark_threshold: int) -> Raster:
    if isinstance(image, Raster):
        return image
    if isinstance(image, Image.Image):
        return Raster.from_image(image, dark_threshold)
    return Raster.from_array(image, dark_threshold)


def process_document(
    source: Union[str, Path, Image.Image],
    settings: Optional[Settings] = None,
    sink: Optional[LogSink] = None,
    ocr: Optional[OcrEngine] = None,
    page: int = 0,
) -> List[UsageChartData]:
    """
    Load a bill, OCR it once at full-page granularity and extract its usage charts.

    Any loader, decoding or OCR failure is logged and yields an empty list, so a calling
    workflow can carry on with whatever other bill data it has.
    """
    return run_document(source, settings, sink, ocr, page)[1]


def run_document(
    source: Union[str, Path, Image.Image],
    settings: Optional[Settings] = None,
    sink: Optional[LogSink] = None,
    ocr: Optional[OcrEngine] = None,
    page: int = 0,
) -> Tuple[List[CandidateOutcome], List[UsageChartData]]:
    """Like process_document, but also returns the per-candidate outcomes."""
    s = settings or DEFAULT_SETTINGS
    emit = resolve_sink(sink)
    emit("INFO", "Starting programmatic chart processing.")
    try:
        img = source if isinstance(source, Image.Image) else load_image(str(source), page=page, dpi=s.pdf_dpi)
        raster = Raster.from_image(img, s.dark_threshold)
        engine = ocr or TesseractOcr.from_settings(s)
        words = engine.recognize(img)
    except Exception as e:     # loader, OCR or decoding: nothing can be read off this page
        emit("ERROR", "The chart processing engine failed.", e)
        return [], []
    emit("DEBUG", f"Chart processor OCR complete. Found {len(words)} words.")

    outcomes = analyze_words(raster, words, s, sink=emit)
    charts = successful_charts(outcomes)
    emit("INFO", f"Programmatic chart analysis finished. Extracted {len(charts)} chart(s).",
         [c.to_public() for c in charts])
    return outcomes, charts

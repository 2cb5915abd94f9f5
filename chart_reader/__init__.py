from .logging_config import setup_logging

# Initialize logging early when the package is imported so modules log consistently.
setup_logging()

from .assemble import UsageChartData, MonthUsage, SeriesValue
from .candidates import ChartCandidate
from .errors import (
    ChartReaderError, InsufficientAxisData, ScanFailure,
    TotalPipelineFailure, ImageLoadError, OcrEngineError,
)
from .pipeline import CandidateOutcome, extract_usage_charts, process_document
from .raster import Raster
from .words import BBox, OcrWord

__all__ = [
    "BBox", "OcrWord", "ChartCandidate", "Raster",
    "UsageChartData", "MonthUsage", "SeriesValue", "CandidateOutcome",
    "extract_usage_charts", "process_document",
    "ChartReaderError", "InsufficientAxisData", "ScanFailure",
    "TotalPipelineFailure", "ImageLoadError", "OcrEngineError",
]

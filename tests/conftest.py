import math
from typing import Dict, List, Optional, Sequence, Tuple

import pytest

from chart_reader.raster import Raster
from chart_reader.words import BBox, OcrWord

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

# Layout of the synthetic chart: month labels 30px wide on a 50px pitch,
# y-axis labels in a narrow column just left of the first month.
MONTH_W = 30
MONTH_PITCH = 50


def word(text: str, x0: float, y0: float, x1: float, y1: float, conf: float = 95.0) -> OcrWord:
    return OcrWord(text=text, bbox=BBox(x0, y0, x1, y1), confidence=conf)


def label_at(text: str, cx: float, cy: float, w: float = 14, h: float = 12) -> OcrWord:
    return word(text, cx - w / 2, cy - h / 2, cx + w / 2, cy + h / 2)


def chart_words(
    months: Sequence[str] = MONTH_NAMES[:4],
    axis: Sequence[Tuple[str, float]] = (("0", 300), ("500", 100)),
    left: float = 60,
    row_y: float = 316,
    legend: Sequence[str] = (),
    extra: Sequence[OcrWord] = (),
) -> Dict[str, List[OcrWord]]:
    """Words of one chart: a month row, a y-axis column, an optional legend row."""
    month_words = [
        word(m, left + k * MONTH_PITCH, row_y - 6, left + k * MONTH_PITCH + MONTH_W, row_y + 6)
        for k, m in enumerate(months)
    ]
    axis_words = [label_at(text, left - 10, y) for text, y in axis]
    top = min(y for _, y in axis) if axis else row_y
    legend_words = [label_at(y, left + 90 + k * 60, top - 50, w=30) for k, y in enumerate(legend)]
    return {
        "months": month_words,
        "axis": axis_words,
        "legend": legend_words,
        "all": [*month_words, *axis_words, *legend_words, *extra],
    }


def month_slot_x(month: OcrWord, series: int, n_series: int) -> int:
    slot = month.bbox.width / n_series
    return math.floor(month.bbox.x0 + series * slot + slot / 2 + 0.5)


def draw_bars(raster: Raster, bars: Sequence[Tuple[int, int]], baseline: int, half_width: int = 4) -> Raster:
    """Fill one dark bar per (x, top_y), from top_y down to and including `baseline`."""
    for x, top in bars:
        raster = raster.with_rect(x - half_width, top, x + half_width + 1, baseline + 1)
    return raster


class RecordingSink:
    def __init__(self):
        self.events: List[Tuple[str, str, Optional[object]]] = []

    def __call__(self, level, message, payload=None):
        self.events.append((level, message, payload))

    def levels(self, level: str) -> List[str]:
        return [m for lvl, m, _ in self.events if lvl == level]


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def blank():
    return Raster.blank(800, 1000)

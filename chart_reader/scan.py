from __future__ import annotations
from dataclasses import dataclass
import math
from typing import List, Optional

from .calibrate import AxisCalibration
from .candidates import ChartCandidate
from .logging_config import LogSink, resolve_sink
from .raster import Raster


@dataclass(frozen=True)
class BarReading:
    month: str
    series: str
    x: int
    top_y: Optional[int]   # None: no bar in this slot
    value: int


def _round_half_up(v: float) -> int:
    return math.floor(v + 0.5)


def series_labels(candidate: ChartCandidate) -> List[str]:
    n = max(1, len(candidate.legend))
    return [
        candidate.legend[i].text if i < len(candidate.legend) else f"Year {i + 1}"
        for i in range(n)
    ]


def find_bar_top(raster: Raster, x: int, start_y: int, stop_y: float) -> Optional[int]:
    """
    Walk up column `x` from `start_y` while y > `stop_y`.

    The first dark pixel is the bar; its contiguous dark run is followed
    upward and the topmost row of the run is returned. None when the column
    is background all the way up.
    """
    y = min(start_y, raster.height - 1)
    while y > stop_y and not raster.is_dark(x, y):
        y -= 1
    if y <= stop_y:
        return None
    while y - 1 > stop_y and raster.is_dark(x, y - 1):
        y -= 1
    return y


def scan_candidate(
    raster: Raster,
    candidate: ChartCandidate,
    calibration: AxisCalibration,
    sink: Optional[LogSink] = None,
) -> List[BarReading]:
    """
    Measure every month x series slot of a candidate.

    Bars of one month are assumed to sit side by side under the month label in
    legend order, so each label's width is split evenly into one slot per
    series and the column through the middle of each slot is scanned.
    """
    emit = resolve_sink(sink)
    emit("INFO", f"Starting programmatic bar detection for Chart {candidate.id}.")

    labels = series_labels(candidate)
    start_y = math.floor(calibration.zero_line_y)
    stop_y = candidate.bounds.y0
    readings: List[BarReading] = []

    for month in candidate.months:
        slot = month.bbox.width / len(labels)
        for i, series in enumerate(labels):
            x = _round_half_up(month.bbox.x0 + i * slot + slot / 2)
            top_y = find_bar_top(raster, x, start_y, stop_y)
            if top_y is None:
                value = 0
            else:
                value = _round_half_up((calibration.zero_line_y - top_y) * calibration.value_per_pixel)
                emit("DEBUG", f"Detected bar for {month.text} {series}",
                     {"scan_x": x, "bar_top_y": top_y, "value": value})
            readings.append(BarReading(month=month.text, series=series, x=x, top_y=top_y, value=value))

    return readings

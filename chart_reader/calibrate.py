from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Dict, Any, Sequence

from .classify import parse_number
from .errors import InsufficientAxisData
from .words import OcrWord


@dataclass(frozen=True)
class AxisCalibration:
    value_per_pixel: float
    zero_line_y: float    # pixel row of value 0; may sit below the lowest printed label
    pixel_min: float      # row of the smallest label
    pixel_max: float      # row of the largest label
    value_min: float
    value_max: float

    def value(self, y: float) -> float:
        return (self.zero_line_y - y) * self.value_per_pixel

    def to_public(self) -> Dict[str, Any]:
        return asdict(self)


def calibrate_axis(y_axis: Sequence[OcrWord]) -> AxisCalibration:
    """
    Affine pixel -> value mapping from a candidate's y-axis labels.

    The two extreme labels anchor the scale. The zero line is extrapolated from
    the top anchor, so an axis printed from a non-zero floor (100, 200, ...)
    still measures bars from their true baseline.

    Raises InsufficientAxisData when fewer than two distinct values parse, and
    also for an axis whose larger value is not drawn above the smaller one
    (inverted or flat): such labels cannot calibrate a bar chart.
    """
    points = []
    for w in y_axis:
        v = parse_number(w.text)
        if v is not None:
            points.append((v, w.bbox.center_y))

    if len({v for v, _ in points}) < 2:
        raise InsufficientAxisData(
            f"need 2 distinct y-axis values, got {[w.text for w in y_axis]}"
        )

    points.sort(key=lambda p: p[0])
    value_min, pixel_min = points[0]
    value_max, pixel_max = points[-1]

    if pixel_max >= pixel_min:
        # larger value drawn level with or below the smaller one
        raise InsufficientAxisData(
            f"y-axis labels are not ordered bottom-up: {value_min}@{pixel_min}, {value_max}@{pixel_max}"
        )

    value_per_pixel = (value_max - value_min) / abs(pixel_min - pixel_max)
    if value_min == 0:
        zero_line_y = pixel_min
    else:
        zero_line_y = pixel_max + value_max / value_per_pixel

    return AxisCalibration(
        value_per_pixel=value_per_pixel,
        zero_line_y=zero_line_y,
        pixel_min=pixel_min,
        pixel_max=pixel_max,
        value_min=value_min,
        value_max=value_max,
    )

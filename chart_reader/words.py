from __future__ import annotations
from dataclasses import dataclass
import math
from typing import Iterable, Tuple


@dataclass(frozen=True)
class BBox:
    x0: float
    y0: float
    x1: float
    y1: float   # pixel rectangle, y grows downward

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0

    @property
    def center_x(self) -> float:
        return (self.x0 + self.x1) / 2

    @property
    def center_y(self) -> float:
        return (self.y0 + self.y1) / 2

    @property
    def center(self) -> Tuple[float, float]:
        return self.center_x, self.center_y

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.x0, self.y0, self.x1, self.y1)

    @staticmethod
    def union(boxes: Iterable["BBox"]) -> "BBox":
        boxes = list(boxes)
        if not boxes:
            raise ValueError("union of zero boxes")
        return BBox(
            min(b.x0 for b in boxes),
            min(b.y0 for b in boxes),
            max(b.x1 for b in boxes),
            max(b.y1 for b in boxes),
        )


# eq=False: two words with identical text and box are still different words.
@dataclass(frozen=True, eq=False)
class OcrWord:
    text: str
    bbox: BBox
    confidence: float = 0.0

    def to_public(self) -> dict:
        return {"text": self.text, "bbox": self.bbox.as_tuple(), "confidence": self.confidence}


def distance(p1: Tuple[float, float], p2: Tuple[float, float]) -> float:
    return math.hypot(p2[0] - p1[0], p2[1] - p1[1])


def horizontally_aligned(a: OcrWord, b: OcrWord, tolerance: float) -> bool:
    """Same text row: vertical centers closer than `tolerance`."""
    return abs(a.bbox.center_y - b.bbox.center_y) < tolerance


def vertically_aligned(a: OcrWord, b: OcrWord, tolerance: float) -> bool:
    """Same column: horizontal centers closer than `tolerance`."""
    return abs(a.bbox.center_x - b.bbox.center_x) < tolerance

from dataclasses import dataclass
from typing import Optional, Dict, Any, Tuple

from .words import BBox, OcrWord

@dataclass(frozen=True)
class ChartCandidate:
    id: int                       # discovery order on the page, from 0
    months: Tuple[OcrWord, ...]   # left -> right, always more than 3
    y_axis: Tuple[OcrWord, ...]   # at least 2 numeric labels
    bounds: BBox
    legend: Tuple[OcrWord, ...] = ()   # left -> right == series order
    title: Tuple[OcrWord, ...] = ()
    unit: Optional[OcrWord] = None

    def to_public(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "months": [w.text for w in self.months],
            "y_axis": [w.text for w in self.y_axis],
            "legend": [w.text for w in self.legend],
            "title": " ".join(w.text for w in self.title),
            "unit": self.unit.text if self.unit else None,
            "bounds": self.bounds.as_tuple(),
        }

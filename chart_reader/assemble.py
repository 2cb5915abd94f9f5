from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Sequence, Tuple

from .candidates import ChartCandidate
from .scan import BarReading

DEFAULT_UNIT = "Units"


@dataclass(frozen=True)
class SeriesValue:
    year: str
    value: float


@dataclass(frozen=True)
class MonthUsage:
    month: str
    usage: Tuple[SeriesValue, ...]


@dataclass(frozen=True)
class UsageChartData:
    title: str
    unit: str
    data: Tuple[MonthUsage, ...]

    def to_public(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "unit": self.unit,
            "data": [
                {"month": m.month, "usage": [{"year": u.year, "value": u.value} for u in m.usage]}
                for m in self.data
            ],
        }


def assemble_chart(candidate: ChartCandidate, readings: Sequence[BarReading]) -> UsageChartData:
    # scan order is month-major, one reading per series
    n = max(1, len(candidate.legend))
    data = tuple(
        MonthUsage(
            month=readings[k].month,
            usage=tuple(SeriesValue(year=r.series, value=r.value) for r in readings[k:k + n]),
        )
        for k in range(0, len(readings), n)
    )
    return UsageChartData(
        title=" ".join(w.text for w in candidate.title) or f"Usage Chart {candidate.id}",
        unit=candidate.unit.text if candidate.unit else DEFAULT_UNIT,
        data=data,
    )

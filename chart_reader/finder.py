# chart_reader/finder.py
from __future__ import annotations
from typing import FrozenSet, Iterable, List, Optional, Sequence

from .candidates import ChartCandidate
from .classify import classify, is_month, is_number, is_unit, is_year
from .config import DEFAULT_SETTINGS, Settings
from .logging_config import LogSink, resolve_sink
from .words import BBox, OcrWord, distance, horizontally_aligned, vertically_aligned

Owned = FrozenSet[int]


def _claim(owned: Owned, words: Iterable[OcrWord]) -> Owned:
    return owned | {id(w) for w in words}


def _is_owned(owned: Owned, word: OcrWord) -> bool:
    return id(word) in owned


def _month_row(months: Sequence[OcrWord], start: int, tolerance: float) -> List[OcrWord]:
    """The month at `start` plus every later month sharing its text row."""
    seed = months[start]
    row = [seed]
    for other in months[start + 1:]:
        if horizontally_aligned(seed, other, tolerance):
            row.append(other)
    return sorted(row, key=lambda w: w.bbox.x0)


def _axis_row_months(months: Sequence[OcrWord], s: Settings) -> List[OcrWord]:
    """Month words that sit on a row long enough to be some chart's x-axis."""
    return [
        m for m in months
        if sum(1 for o in months if horizontally_aligned(m, o, s.month_row_tolerance)) >= s.min_months
    ]


def _y_axis_labels(
    numbers: Sequence[OcrWord],
    row: Sequence[OcrWord],
    axis_months: Sequence[OcrWord],
    tolerance: float,
    row_tolerance: float,
) -> List[OcrWord]:
    """
    Numeric words in the column of the row's first month, left of it.

    A label below the month row, or separated from it by another chart's
    month row, belongs to some other chart.
    """
    first = row[0]
    row_y = sum(w.bbox.center_y for w in row) / len(row)
    mine = {id(w) for w in row}
    other_rows = [
        m.bbox.center_y for m in axis_months
        if id(m) not in mine and first.bbox.x0 <= m.bbox.center_x <= row[-1].bbox.x1
    ]

    def separated(n: OcrWord) -> bool:
        return any(n.bbox.center_y < y < row_y - row_tolerance for y in other_rows)

    labels = [
        n for n in numbers
        if vertically_aligned(n, first, tolerance) and n.bbox.x1 < first.bbox.x0
        and n.bbox.center_y < row_y + row_tolerance and not separated(n)
    ]
    return sorted(labels, key=lambda w: w.bbox.center_y)


def _legend(years: Sequence[OcrWord], bounds: BBox, radius: float) -> List[OcrWord]:
    # Left-to-right legend order is taken as series order; nothing checks it against the bars.
    near = [y for y in years if distance(y.bbox.center, bounds.center) < radius]
    return sorted(near, key=lambda w: w.bbox.x0)


def _unit(units: Sequence[OcrWord], bounds: BBox, radius: float) -> Optional[OcrWord]:
    anchor = (bounds.x0, bounds.center_y)
    near = [(distance(u.bbox.center, anchor), i, u) for i, u in enumerate(units)]
    near = [t for t in near if t[0] < radius]
    return min(near, key=lambda t: (t[0], t[1]))[2] if near else None


def _title(words: Sequence[OcrWord], bounds: BBox, band: float, row_tolerance: float) -> List[OcrWord]:
    """Untagged words on the text line closest above the chart."""
    above = [
        w for w in words
        if not classify(w)
        and w.bbox.x1 > bounds.x0 and w.bbox.x0 < bounds.x1
        and w.bbox.y1 <= bounds.y0 and w.bbox.y0 >= bounds.y0 - band
    ]
    if not above:
        return []
    nearest = max(above, key=lambda w: w.bbox.center_y)
    line = [w for w in above if horizontally_aligned(w, nearest, row_tolerance)]
    return sorted(line, key=lambda w: w.bbox.x0)


def find_chart_candidates(
    words: Sequence[OcrWord],
    settings: Optional[Settings] = None,
    sink: Optional[LogSink] = None,
) -> List[ChartCandidate]:
    """
    Cluster classified OCR words into independent bar-chart regions.

    A chart is anchored on a row of more than three aligned month labels. Each
    month word belongs to at most one chart: rows are claimed first-come in
    left-to-right, top-to-bottom order and later rows overlapping a claimed
    word are dropped. A row without at least two y-axis labels to the left of
    its first month cannot be calibrated and is dropped without claiming.
    """
    s = settings or DEFAULT_SETTINGS
    emit = resolve_sink(sink)
    emit("DEBUG", "Starting chart candidate discovery", {"words": len(words)})

    months = sorted((w for w in words if is_month(w)), key=lambda w: (w.bbox.x0, w.bbox.center_y))
    numbers = [w for w in words if is_number(w)]
    years = [w for w in words if is_year(w)]
    units = [w for w in words if is_unit(w)]
    axis_months = _axis_row_months(months, s)
    emit("DEBUG", "Classified words", {
        "months": len(months), "numbers": len(numbers), "years": len(years), "units": len(units),
    })

    owned: Owned = frozenset()
    candidates: List[ChartCandidate] = []

    for i, seed in enumerate(months):
        if _is_owned(owned, seed):
            continue
        row = _month_row(months, i, s.month_row_tolerance)
        if len(row) < s.min_months:
            continue
        if any(_is_owned(owned, w) for w in row):
            emit("DEBUG", f"Month row at '{seed.text}' overlaps an earlier chart; skipped")
            continue

        y_axis = _y_axis_labels(numbers, row, axis_months, s.y_axis_tolerance, s.month_row_tolerance)
        if len(y_axis) < 2:
            emit("DEBUG", f"Month row at '{seed.text}' has {len(y_axis)} y-axis label(s); skipped",
                 {"months": [w.text for w in row]})
            continue

        bounds = BBox.union(w.bbox for w in (*y_axis, *row))
        cand = ChartCandidate(
            id=len(candidates),
            months=tuple(row),
            y_axis=tuple(y_axis),
            bounds=bounds,
            legend=tuple(_legend([y for y in years if y not in y_axis], bounds, s.legend_radius)),
            title=tuple(_title(words, bounds, s.title_band, s.month_row_tolerance)),
            unit=_unit(units, bounds, s.unit_radius),
        )
        candidates.append(cand)
        owned = _claim(owned, row)

    emit("INFO", f"Found {len(candidates)} potential chart(s) on the page.",
         [c.to_public() for c in candidates])
    return candidates

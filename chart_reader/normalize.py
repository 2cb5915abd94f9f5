# chart_reader/normalize.py
from __future__ import annotations
import re
from typing import Any, Dict, List

_flat_month_re = re.compile(r"([a-zA-Z]{3,})\.?\s*,?\s*(\d{4})")
_numeric_re = re.compile(r"[^0-9.\-]+")

def _s(x: Any) -> str:
    if x is None: return ""
    return x if isinstance(x, str) else str(x)

def _f(x: Any) -> float:
    if isinstance(x, bool): return 0.0
    if isinstance(x, (int, float)): return float(x)
    try:
        return float(_numeric_re.sub("", _s(x)))
    except ValueError:
        return 0.0

def _nested(points: List[Any]) -> bool:
    return all(isinstance(p, dict) and p.get("month") and isinstance(p.get("usage"), list) for p in points)

def _normalize_nested(points: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    out = []
    for p in points:
        usage = [
            {"year": _s(u.get("year", "")), "value": _f(u.get("value"))}
            for u in p["usage"] if isinstance(u, dict)
        ]
        out.append({"month": _s(p["month"]), "usage": usage})
    return out

def _regroup_flat(points: List[Any]) -> List[Dict[str, Any]]:
    # {"month": "Jan 2023", "value": 410} -> {"month": "Jan", "usage": [{"year": "2023", ...}]}
    by_month: Dict[str, Dict[str, Any]] = {}
    for p in points:
        if not isinstance(p, dict) or not isinstance(p.get("month"), str) or p.get("value") is None:
            continue
        m = _flat_month_re.search(p["month"])
        if not m:
            continue
        month, year = m.group(1), m.group(2)
        by_month.setdefault(month, {"month": month, "usage": []})
        by_month[month]["usage"].append({"year": year, "value": _f(p["value"])})
    return list(by_month.values())

def normalize_usage_charts(raw: Any) -> List[Dict[str, Any]]:
    """
    Coerces a usage-chart payload (ours, or one returned by the AI fusion step)
    into the UsageChartData dict shape so downstream code never crashes.
    Ensures:
      - the result is a list; non-dict charts and charts without data are dropped
      - title/unit are strings
      - data is a list of {month, usage: [{year, value: float}]}, regrouping
        flat {"month": "Jan 2023", "value": ...} points by month
    Leaves any extra chart keys intact.
    """
    if isinstance(raw, dict):
        raw = [raw]
    if not isinstance(raw, list):
        return []

    charts = []
    for chart in raw:
        if not isinstance(chart, dict) or not chart.get("data"):
            continue
        c = dict(chart)
        points = c["data"] if isinstance(c["data"], list) else []
        c["data"] = _normalize_nested(points) if _nested(points) else _regroup_flat(points)
        c["title"] = _s(c.get("title", ""))
        c["unit"] = _s(c.get("unit", ""))
        charts.append(c)
    return charts

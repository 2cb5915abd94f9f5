# chart_reader/annotate.py
from __future__ import annotations
from pathlib import Path
from typing import Sequence
from PIL import Image, ImageDraw

from .pipeline import CandidateOutcome

BOUNDS_COLOR = (0, 160, 255)
ZERO_COLOR = (0, 200, 0)
HIT_COLOR = (255, 0, 0)
MISS_COLOR = (255, 160, 0)
FAILED_COLOR = (160, 160, 160)


def annotate_outcomes(img: Image.Image, outcomes: Sequence[CandidateOutcome], out_path: str) -> str:
    """Draw candidate bounds, zero lines and scan points over a copy of the page."""
    canvas = img.convert("RGB")
    draw = ImageDraw.Draw(canvas)
    for o in outcomes:
        b = o.candidate.bounds
        color = BOUNDS_COLOR if o.ok else FAILED_COLOR
        draw.rectangle([b.x0, b.y0, b.x1, b.y1], outline=color, width=2)
        draw.text((b.x0, max(0, b.y0 - 12)), f"chart {o.candidate.id}", fill=color)
        if o.calibration is None:
            continue
        zero = o.calibration.zero_line_y
        draw.line([b.x0, zero, b.x1, zero], fill=ZERO_COLOR, width=1)
        for r in o.readings:
            if r.top_y is None:
                draw.line([r.x, zero, r.x, b.y0], fill=MISS_COLOR, width=1)
            else:
                draw.line([r.x, zero, r.x, r.top_y], fill=HIT_COLOR, width=1)
                draw.ellipse([r.x - 3, r.top_y - 3, r.x + 3, r.top_y + 3], outline=HIT_COLOR)

    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    canvas.save(out_path, format="PNG")
    return out_path

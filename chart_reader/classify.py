# chart_reader/classify.py
import re
from typing import Optional, Set

from .words import OcrWord

MONTHS = ("january", "february", "march", "april", "may", "june",
          "july", "august", "september", "october", "november", "december")
UNIT_TOKENS = {"kwh", "m³", "m3", "therms", "ccf"}

_alpha_re = re.compile(r"[^a-z]")
_number_re = re.compile(r"[-+]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")
_year_re = re.compile(r"[0-9]{4}")


def is_month(word: OcrWord) -> bool:
    # "Sept", "Oct." and "October" match; "Ma" is too short to tell May from March.
    clean = _alpha_re.sub("", word.text.lower())
    if len(clean) < 3:
        return False
    return any(m.startswith(clean) for m in MONTHS)


def parse_number(text: str) -> Optional[float]:
    t = text.strip().replace(",", "")
    if not _number_re.fullmatch(t):
        return None
    return float(t)


def is_number(word: OcrWord) -> bool:
    return parse_number(word.text) is not None


def is_year(word: OcrWord) -> bool:
    return _year_re.fullmatch(word.text) is not None


def is_unit(word: OcrWord) -> bool:
    return word.text.lower() in UNIT_TOKENS


def classify(word: OcrWord) -> Set[str]:
    """All tags a word carries; predicates are independent, so a word can have several."""
    tags = set()
    if is_month(word): tags.add("month")
    if is_number(word): tags.add("number")
    if is_year(word): tags.add("year")
    if is_unit(word): tags.add("unit")
    return tags

import re

_slug_re = re.compile(r"[^a-z0-9]+")
def slugify(value: str) -> str:
    v = value.strip().lower()
    v = _slug_re.sub("-", v)
    v = v.strip("-")
    return v[:120] or "document"

# vip_webhook/tags.py
from typing import List, Optional


def split_tags(existing: Optional[str]) -> List[str]:
    """Shopify CSV tag string -> ordered list, trimmed, no empties, no repeats."""
    seen = set()
    out = []
    for t in (existing or "").split(","):
        t = t.strip()
        if t and t not in seen:
            seen.add(t)
            out.append(t)
    return out


def add_tag(existing: Optional[str], tag: str) -> str:
    tags = split_tags(existing)
    if tag not in tags:
        tags.append(tag)
    return ", ".join(tags)

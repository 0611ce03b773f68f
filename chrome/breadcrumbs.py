"""
Chrome - Breadcrumb Trails.

A trail attribute is either a JSON list of {label, url}
objects or the comma form "Label,/url,Label2,/url2". The last
crumb is the current page and is rendered without a link.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Crumb:
    """One step of a breadcrumb trail."""
    label: str
    url: Optional[str] = None


def _from_json(items: Any) -> List[Crumb]:
    if not isinstance(items, list):
        return []
    trail = []
    for item in items:
        if not isinstance(item, dict) or "label" not in item:
            continue
        url = item.get("url")
        trail.append(Crumb(label=str(item["label"]), url=str(url) if url else None))
    return trail


def _from_pairs(attr: str) -> List[Crumb]:
    parts = attr.split(",")
    trail = []
    for i in range(0, len(parts), 2):
        label = parts[i].strip()
        if not label:
            continue
        url = parts[i + 1].strip() if i + 1 < len(parts) else ""
        trail.append(Crumb(label=label, url=url or None))
    return trail


def parse_trail(attr: Optional[str]) -> List[Crumb]:
    """
    Parse a trail attribute.

    Args:
        attr: Raw attribute value

    Returns:
        Crumbs in display order (empty when nothing usable)
    """
    if not attr or not attr.strip():
        return []
    text = attr.strip()
    if text.startswith("["):
        try:
            return _from_json(json.loads(text))
        except json.JSONDecodeError:
            logger.debug(f"Trail is not valid JSON: {text!r}")
            return []
    return _from_pairs(text)


def serialize_trail(trail: Sequence[Crumb]) -> str:
    """Serialize a trail to the JSON attribute form."""
    return json.dumps([{"label": c.label, "url": c.url} for c in trail])


def add_crumb(trail: Sequence[Crumb], label: str, url: Optional[str] = None) -> List[Crumb]:
    return [*trail, Crumb(label=label, url=url)]


def current_crumb(trail: Sequence[Crumb]) -> Optional[Crumb]:
    return trail[-1] if trail else None


def linked_crumbs(trail: Sequence[Crumb]) -> List[Crumb]:
    """Crumbs rendered as links: every crumb but the current one."""
    return list(trail[:-1])


__all__ = [
    "Crumb",
    "parse_trail",
    "serialize_trail",
    "add_crumb",
    "current_crumb",
    "linked_crumbs",
]

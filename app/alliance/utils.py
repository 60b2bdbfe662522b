from __future__ import annotations

import json
import logging
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

SECTIONS_FORMAT_ERROR = "Invalid format for category sections."


def is_safe_link(value: str | None) -> bool:
    """Empty, a local path (not protocol-relative) or an absolute http(s) URL."""
    if not value:
        return True
    if value.startswith("/"):
        return not value.startswith(("//", "/\\"))
    parts = urlsplit(value)
    return parts.scheme.lower() in ("http", "https") and bool(parts.netloc)


def is_real_id(record_id: str | None) -> bool:
    """Editors post an empty string or the literal "null" for new records."""
    return bool(record_id) and record_id not in ("null", "undefined")


def _clean(value) -> str:
    return str(value).strip() if value is not None else ""


def parse_features(raw) -> list[str]:
    """Features come as a JSON list or a newline-separated string; blanks are dropped."""
    if raw is None:
        return []
    if isinstance(raw, str):
        items = raw.splitlines()
    elif isinstance(raw, (list, tuple)):
        items = raw
    else:
        raise ValueError("features must be a list or a string")
    return [f for f in (_clean(i) for i in items) if f]


def parse_sections(raw: str | None) -> tuple[list[dict] | None, str | None]:
    """
    Parse the `sections_json` form field into normalized section dicts.
    Returns (sections, error); empty input is an empty list.
    """
    if not raw or not raw.strip():
        return [], None
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("Failed to parse sections JSON: %s", e)
        return None, SECTIONS_FORMAT_ERROR
    if not isinstance(value, list):
        return None, SECTIONS_FORMAT_ERROR

    sections = []
    for item in value:
        if not isinstance(item, dict):
            return None, SECTIONS_FORMAT_ERROR
        try:
            features = parse_features(item.get("features"))
        except ValueError:
            return None, SECTIONS_FORMAT_ERROR
        sections.append(
            {
                "title": _clean(item.get("title")),
                "description": _clean(item.get("description")) or None,
                "image_url": _clean(item.get("image_url")) or None,
                "features": features,
            }
        )
    return sections, None


def sections_to_json(sections) -> str:
    """Serialize section rows (or dicts) back into the editor's JSON format."""
    out = []
    for sec in sections or []:
        get = sec.get if isinstance(sec, dict) else (lambda k, _s=sec: getattr(_s, k, None))
        out.append(
            {
                "title": get("title") or "",
                "description": get("description") or "",
                "image_url": get("image_url") or "",
                "features": list(get("features") or []),
            }
        )
    return json.dumps(out, indent=2)

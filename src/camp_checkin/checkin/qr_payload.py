"""Turn raw scanner text into an attendee identifier.

Tickets printed over the life of the event carry different payloads: a full JSON
object, a JSON fragment cut short by the scanner, ``id:<uuid>``, a bare UUID or a
short hand-typed code. Extraction tries each shape in order and never raises.
"""

from __future__ import annotations

import json
import re

from ..core.constants import BARE_ID_MAX_LENGTH

UUID_RE = re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE)
JSON_ID_RE = re.compile(r'"id"\s*:\s*"([^"]+)"')
ID_PREFIX_RE = re.compile(r"^\s*id:\s*", re.IGNORECASE)

_JSON_ID_KEYS = ("id", "ID", "Id")


def _id_from_json(text: str) -> str | None:
    try:
        data = json.loads(text)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    for key in _JSON_ID_KEYS:
        value = data.get(key)
        if value:
            return str(value)
    return None


def extract_attendee_id(raw: str | None) -> str | None:
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if not text:
        return None

    if text.startswith("{") and text.endswith("}"):
        found = _id_from_json(text)
        if found:
            return found

    if text.startswith("{"):
        m = JSON_ID_RE.search(text)
        if m:
            return m.group(1)

    m = UUID_RE.search(text)
    if m:
        return m.group(0)

    if len(text) < BARE_ID_MAX_LENGTH:
        return text

    return None


def normalize_lookup_id(candidate: str) -> str:
    """Drop a legacy ``id:`` prefix left on short hand-typed codes."""
    return ID_PREFIX_RE.sub("", candidate or "").strip()

# vms/utils/json_parser.py
"""
Helpers for the JSON text parts of multipart visitor requests.
The reception front-end sends visitor fields as a JSON string in a form
field (visitorJsonData / visitor) next to the optional photo file.
"""

import json
from typing import Optional

from vms.exceptions import ValidationError


def safe_parse_json(raw: Optional[str]) -> Optional[dict]:
    """Parse a JSON object from text. Returns None on error or non-object JSON."""
    if raw is None:
        return None
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return None
    return data if isinstance(data, dict) else None


def parse_visitor_json(*candidates: Optional[str]) -> dict:
    """
    Use the first form field that was actually sent and parse it.
    Raises ValidationError if none was sent or it is not a JSON object.
    """
    raw = next((c for c in candidates if c is not None), None)
    if raw is None or not raw.strip():
        raise ValidationError("Required part 'visitor' or 'visitorJsonData' is not present")
    data = safe_parse_json(raw)
    if data is None:
        raise ValidationError("Visitor data is not a valid JSON object")
    return data

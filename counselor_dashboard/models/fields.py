import json
from typing import Any

# Cell coercion shared by the record parsers. Sheets hands back "" for empty
# cells and numbers for numeric-looking text, so every reader goes through here.


def text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    s = str(value)
    return s if s != "" else default


def number(value: Any, default: float = 0.0) -> float:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    s = str(value).strip().replace(",", "")
    try:
        return float(s)
    except ValueError:
        return default


def json_cell(value: Any, default):
    """Decode a JSON-encoded cell; lists/dicts pass through untouched."""
    if isinstance(value, (list, dict)):
        return value
    if value is None:
        return default
    s = str(value).strip()
    if not s:
        return default
    try:
        decoded = json.loads(s)
    except ValueError:
        return default
    return decoded if isinstance(decoded, type(default)) else default


def dump_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)

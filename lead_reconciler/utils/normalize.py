"""Field normalization for loosely-typed upstream payloads.

Every function here is total: malformed input yields ``None`` (or is passed
through unchanged where noted), never an exception.
"""

from __future__ import annotations

import ast
import json
import re
from datetime import datetime, timezone
from typing import Any, List, Optional
from urllib.parse import urlsplit

_DOMAIN_FALLBACK_RE = re.compile(r"^(?:[a-z][a-z0-9+.\-]*://)?(?:www\.)?([^/?#:\s]+)", re.IGNORECASE)

_TRUE_STRINGS = {"true", "1", "yes", "y"}
_FALSE_STRINGS = {"false", "0", "no", "n"}


def _parse_literal(text: str) -> Any:
    """Parse JSON first, then a Python literal (``"['a']"``). Raises ValueError on failure."""
    try:
        return json.loads(text)
    except (ValueError, RecursionError, MemoryError):
        pass
    try:
        return ast.literal_eval(text)
    except (ValueError, SyntaxError, TypeError, MemoryError, RecursionError) as exc:
        raise ValueError("unparsable_literal") from exc


def normalize_text(raw: Any) -> Optional[str]:
    """Trimmed string, or None for empty/whitespace/unsupported values."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return str(raw)
    if not isinstance(raw, str):
        return None
    cleaned = raw.strip()
    return cleaned or None


def normalize_email(raw: Any) -> Optional[str]:
    email = normalize_text(raw)
    return email.lower() if email else None


def normalize_url_or_array_wrapped(raw: Any) -> Optional[str]:
    """Return a URL from a plain string or a single-element array rendering.

    ``"['https://x/1']"`` and ``["https://x/1"]`` both give ``"https://x/1"``.
    Array-looking text that fails to parse is returned trimmed, as-is.
    """
    if isinstance(raw, (list, tuple)):
        first = raw[0] if raw else None
        return normalize_text(first) if isinstance(first, str) else None

    text = normalize_text(raw)
    if not text:
        return None

    if not text.startswith("["):
        return text

    try:
        parsed = _parse_literal(text)
    except ValueError:
        return text

    if isinstance(parsed, (list, tuple)):
        if not parsed:
            return None
        first = parsed[0]
        return normalize_text(first) if isinstance(first, str) else None
    return text


def extract_domain(raw: Any) -> Optional[str]:
    """Lowercase host without a leading ``www.``.

    Accepts a bare domain, a ``www.`` domain or a full URL. Invalid URLs fall
    back to a pattern match on the leading host-like segment.
    """
    text = normalize_text(raw)
    if not text:
        return None

    candidate = text if "://" in text else f"http://{text}"
    host: Optional[str]
    try:
        host = urlsplit(candidate).hostname
    except ValueError:
        host = None

    if not host:
        match = _DOMAIN_FALLBACK_RE.match(text)
        host = match.group(1) if match else None
    if not host:
        return None

    host = host.lower().strip().rstrip(".")
    if host.startswith("www."):
        host = host[4:]
    return host or None


def normalize_string_list(raw: Any) -> Optional[List[str]]:
    """Non-empty list of trimmed strings from a list or a stringified list.

    ``"['sales', 'marketing']"`` gives ``["sales", "marketing"]``; a plain
    string gives a one-element list; unparsable array text is kept as one item.
    """
    if isinstance(raw, (list, tuple)):
        items = [normalize_text(item) for item in raw if isinstance(item, str)]
        cleaned = [item for item in items if item]
        return cleaned or None

    text = normalize_text(raw)
    if not text:
        return None

    if text.startswith("["):
        try:
            parsed = _parse_literal(text)
        except ValueError:
            return [text]
        if isinstance(parsed, (list, tuple)):
            return normalize_string_list(list(parsed))
        return [text]

    return [text]


def normalize_year(raw: Any) -> Optional[int]:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw > 0 else None
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() and raw > 0 else None
    text = normalize_text(raw)
    if not text:
        return None
    try:
        value = int(float(text))
    except (ValueError, OverflowError):
        return None
    return value if value > 0 else None


def normalize_int(raw: Any) -> Optional[int]:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None
    text = normalize_text(raw)
    if not text:
        return None
    try:
        return int(text.replace(",", ""))
    except ValueError:
        return None


def normalize_size(raw: Any) -> Optional[str]:
    """Company size band as text; numbers become their integer string."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, float) and raw.is_integer():
        return str(int(raw))
    return normalize_text(raw)


def normalize_bool(raw: Any) -> Optional[bool]:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, int):
        return bool(raw) if raw in (0, 1) else None
    text = normalize_text(raw)
    if not text:
        return None
    lowered = text.lower()
    if lowered in _TRUE_STRINGS:
        return True
    if lowered in _FALSE_STRINGS:
        return False
    return None


def normalize_timestamp(raw: Any) -> Optional[datetime]:
    """Timezone-aware datetime from an ISO 8601 string or epoch milliseconds."""
    if isinstance(raw, datetime):
        return raw if raw.tzinfo else raw.replace(tzinfo=timezone.utc)
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        try:
            return datetime.fromtimestamp(raw / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    text = normalize_text(raw)
    if not text:
        return None
    if text.endswith("Z"):
        text = f"{text[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def normalize_phone_numbers(raw: Any) -> Optional[List[str]]:
    """Phone list from a list, a JSON array string or a single number string."""
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return [str(raw)]
    return normalize_string_list(raw)


_SCALAR_NORMALIZERS = {
    "year": normalize_year,
    "size": normalize_size,
    "boolean": normalize_bool,
    "integer": normalize_int,
    "text": normalize_text,
}


def normalize_scalar(raw: Any, kind: str) -> Any:
    """Dispatch to the normalizer for ``kind`` (year, size, boolean, integer, text)."""
    normalizer = _SCALAR_NORMALIZERS.get(kind)
    if normalizer is None:
        return None
    return normalizer(raw)


def first_present(raw: dict, *keys: str) -> Any:
    """First value under ``keys`` that is not None (alias resolution)."""
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None

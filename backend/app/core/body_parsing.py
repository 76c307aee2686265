"""Body Parsing — pure decoders for URL-encoded and JSON request bodies.

Invariants:
    - URL-encoded parsing is flat: "a[b]=1" yields the key "a[b]", never a nested dict
    - Repeated URL-encoded keys collect into a list in arrival order
    - JSON parsing is strict: top level must be an object or array, no NaN/Infinity
    - Invalid percent-escapes in URL-encoded bodies are malformed, never replaced
    - Empty bodies parse to {} for both formats
    - Failures raise MalformedBodyError / PayloadTooLargeError (core/errors.py)

Design Decisions:
    - No IO here: the middleware reads the bytes, these functions only decode them
"""

import json
from urllib.parse import parse_qsl

from app.core.domain_types import BodyFormat
from app.core.errors import MalformedBodyError, PayloadTooLargeError

_JSON_OPENERS = ("{", "[")


def media_type_of(content_type: str | None) -> str:
    """Lower-cased media type without parameters ("" when absent)."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def charset_of(content_type: str | None, default: str = "utf-8") -> str:
    """Charset parameter of a Content-Type header."""
    if not content_type:
        return default
    for param in content_type.split(";")[1:]:
        key, _, value = param.strip().partition("=")
        if key.lower() == "charset" and value:
            return value.strip().strip('"').lower()
    return default


def _decode(body: bytes, charset: str, media_type: str) -> str:
    try:
        return body.decode(charset)
    except (LookupError, UnicodeDecodeError) as e:
        raise MalformedBodyError(
            f"Body is not valid {charset}: {e}", media_type,
        )


def parse_urlencoded(
    body: bytes, charset: str = "utf-8", max_fields: int = 1000,
) -> dict[str, str | list[str]]:
    """Decode a flat application/x-www-form-urlencoded body."""
    if not body:
        return {}
    text = _decode(body, charset, BodyFormat.URLENCODED.value)
    try:
        pairs = parse_qsl(
            text, keep_blank_values=True, max_num_fields=max_fields,
            encoding=charset, errors="strict",
        )
    except UnicodeDecodeError as e:
        raise MalformedBodyError(
            f"Percent-escape is not valid {charset}: {e.reason}",
            BodyFormat.URLENCODED.value,
        )
    except ValueError:
        raise PayloadTooLargeError(
            f"Too many parameters (limit {max_fields})", max_fields,
        )
    parsed: dict[str, str | list[str]] = {}
    for key, value in pairs:
        if key not in parsed:
            parsed[key] = value
            continue
        existing = parsed[key]
        if isinstance(existing, list):
            existing.append(value)
        else:
            parsed[key] = [existing, value]
    return parsed


def _reject_constant(name: str):
    raise ValueError(f"{name} is not a JSON value")


def parse_json(body: bytes, charset: str = "utf-8") -> dict | list:
    """Decode a strict application/json body."""
    if not body:
        return {}
    text = _decode(body, charset, BodyFormat.JSON.value).strip()
    if not text:
        return {}
    if not text.startswith(_JSON_OPENERS):
        raise MalformedBodyError(
            "JSON body must be an object or an array", BodyFormat.JSON.value,
        )
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise MalformedBodyError(
            f"Invalid JSON at line {e.lineno} column {e.colno}: {e.msg}",
            BodyFormat.JSON.value,
        )
    except RecursionError:
        raise MalformedBodyError(
            "JSON body is nested too deeply", BodyFormat.JSON.value,
        )
    except ValueError as e:
        # NaN/Infinity literals and integers past the digit limit
        raise MalformedBodyError(f"Invalid JSON: {e}", BodyFormat.JSON.value)

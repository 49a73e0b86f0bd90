"""Reading the JSON payloads customers attach to messages and requests."""

import json
from urllib.parse import urlparse

from protean.exceptions import ValidationError


def load_object(value, field, label=None):
    """Return ``value`` (a dict or JSON object text) as a dict, or None when empty."""
    label = label or field
    if value in (None, "", {}):
        return None
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            raise ValidationError({field: [f"{label} must be valid JSON"]}) from None
    if not isinstance(value, dict):
        raise ValidationError({field: [f"{label} must be an object"]})
    return value or None


def reject_unknown(data, allowed, field, label):
    unknown = set(data) - set(allowed)
    if unknown:
        raise ValidationError({field: [f"Unknown {label} fields: {', '.join(sorted(unknown))}"]})


def nested_object(data, key):
    value = data.get(key)
    if value is not None and not isinstance(value, dict):
        raise ValidationError({key: [f"{key} must be an object"]})
    return value


def object_list(data, key):
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError({key: [f"{key} must be a list"]})
    if not all(isinstance(entry, dict) for entry in value):
        raise ValidationError({key: [f"Each entry in {key} must be an object"]})
    return value


def string_list(data, key, max_length, label):
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(entry, str) for entry in value):
        raise ValidationError({key: [f"{key} must be a list of text"]})
    if any(len(entry) > max_length for entry in value):
        raise ValidationError({key: [f"{label} too long"]})
    return value


def is_web_url(value) -> bool:
    parsed = urlparse(value or "")
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def compact(mapping: dict) -> dict:
    """Drop unset entries so equal payloads serialise identically."""
    return {k: v for k, v in mapping.items() if v is not None and v != [] and v != {}}

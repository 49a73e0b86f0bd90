"""Cake customizations a customer can attach to a cart or order line.

Customizations travel as JSON text on the line items. ``normalize_customizations``
validates the payload against the value objects below and returns a canonical
JSON string, so two lines with the same choices compare equal.
"""

import json

from protean.exceptions import ValidationError
from protean.fields import Boolean, String, ValueObject

from ordering.domain import ordering


@ordering.value_object(part_of="Cart")
class Decorations:
    color = String(max_length=50, sanitize=False)
    design = String(max_length=100, sanitize=False)
    message = String(max_length=200, sanitize=False)


@ordering.value_object(part_of="Cart")
class Customizations:
    custom_text = String(max_length=500, sanitize=False)
    decorations = ValueObject(Decorations)
    special_instructions = String(max_length=1000, sanitize=False)
    gift_wrap = Boolean(default=False)
    delivery_instructions = String(max_length=500, sanitize=False)

    def to_dict(self):
        data = {
            "custom_text": self.custom_text,
            "special_instructions": self.special_instructions,
            "gift_wrap": True if self.gift_wrap else None,
            "delivery_instructions": self.delivery_instructions,
        }
        if self.decorations is not None:
            decorations = {
                "color": self.decorations.color,
                "design": self.decorations.design,
                "message": self.decorations.message,
            }
            data["decorations"] = {k: v for k, v in decorations.items() if v is not None}
        return {k: v for k, v in data.items() if v is not None and v != {}}


def _load(value):
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            raise ValidationError({"customizations": ["Customizations must be valid JSON"]}) from None
    if not isinstance(value, dict):
        raise ValidationError({"customizations": ["Customizations must be a JSON object"]})
    return value


def normalize_customizations(value) -> str | None:
    """Validate ``value`` (dict or JSON text) and return canonical JSON, or None when empty."""
    if value is None or value == "" or value == {}:
        return None

    data = _load(value)
    known = {"custom_text", "decorations", "special_instructions", "gift_wrap", "delivery_instructions"}
    unknown = set(data) - known
    if unknown:
        raise ValidationError({"customizations": [f"Unknown customization fields: {', '.join(sorted(unknown))}"]})

    decorations = data.get("decorations")
    if decorations is not None and not isinstance(decorations, dict):
        raise ValidationError({"decorations": ["Decorations must be an object"]})

    customizations = Customizations(
        custom_text=data.get("custom_text"),
        decorations=Decorations(**decorations) if decorations else None,
        special_instructions=data.get("special_instructions"),
        gift_wrap=data.get("gift_wrap", False),
        delivery_instructions=data.get("delivery_instructions"),
    )
    canonical = customizations.to_dict()
    return json.dumps(canonical, sort_keys=True) if canonical else None

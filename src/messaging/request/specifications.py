"""What the customer asks for in a custom request, and the pictures they send.

Both travel as JSON text on the CustomRequest::

    specifications:   {"size", "servings", "flavors", "decorations": {...},
                       "dietary": {...}, "delivery": {...}, "custom_options"}
    reference_images: {"images": [{"url", "description"?, "source"?}]}
"""

import json

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, Dict, Integer, List, String, ValueObject

from messaging.domain import messaging
from messaging.shared.payload import (
    compact,
    is_web_url,
    load_object,
    nested_object,
    object_list,
    reject_unknown,
    string_list,
)

_DIETARY_KEYS = ("gluten_free", "vegan", "sugar_free", "nut_free", "dairy_free")
_SPECIFICATION_KEYS = ("size", "servings", "flavors", "decorations", "dietary", "delivery", "custom_options")


@messaging.value_object(part_of="CustomRequest")
class DecorationBrief:
    theme: String(max_length=100, sanitize=False)
    colors: List(content_type=String(max_length=50, sanitize=False))
    text: String(max_length=200, sanitize=False)
    design: String(max_length=500, sanitize=False)

    @classmethod
    def from_payload(cls, data):
        reject_unknown(data, ("theme", "colors", "text", "design"), "decorations", "decoration")
        return cls(
            theme=data.get("theme"),
            colors=string_list(data, "colors", 50, "Color name"),
            text=data.get("text"),
            design=data.get("design"),
        )

    def as_payload(self):
        return compact({"theme": self.theme, "colors": list(self.colors or []), "text": self.text, "design": self.design})


@messaging.value_object(part_of="CustomRequest")
class DietaryNeeds:
    gluten_free: Boolean()
    vegan: Boolean()
    sugar_free: Boolean()
    nut_free: Boolean()
    dairy_free: Boolean()

    @classmethod
    def from_payload(cls, data):
        reject_unknown(data, _DIETARY_KEYS, "dietary", "dietary")
        return cls(**{key: data.get(key) for key in _DIETARY_KEYS})

    def as_payload(self):
        return compact({key: getattr(self, key) for key in _DIETARY_KEYS})


@messaging.value_object(part_of="CustomRequest")
class DeliveryPreference:
    preferred_date: String(max_length=50)
    preferred_time: String(max_length=50)
    location: String(max_length=200, sanitize=False)

    @classmethod
    def from_payload(cls, data):
        reject_unknown(data, ("date", "time", "location"), "delivery", "delivery")
        return cls(preferred_date=data.get("date"), preferred_time=data.get("time"), location=data.get("location"))

    def as_payload(self):
        return compact({"date": self.preferred_date, "time": self.preferred_time, "location": self.location})


@messaging.value_object(part_of="CustomRequest")
class Specifications:
    size: String(max_length=100, sanitize=False)
    servings: Integer(min_value=1, max_value=1000)
    flavors: List(content_type=String(max_length=100, sanitize=False))
    decorations: ValueObject(DecorationBrief)
    dietary: ValueObject(DietaryNeeds)
    delivery: ValueObject(DeliveryPreference)
    custom_options: Dict()

    @classmethod
    def from_payload(cls, value):
        data = load_object(value, "specifications")
        if data is None:
            return None
        reject_unknown(data, _SPECIFICATION_KEYS, "specifications", "specification")

        decorations = nested_object(data, "decorations")
        dietary = nested_object(data, "dietary")
        delivery = nested_object(data, "delivery")
        return cls(
            size=data.get("size"),
            servings=data.get("servings"),
            flavors=string_list(data, "flavors", 100, "Flavor name"),
            decorations=DecorationBrief.from_payload(decorations) if decorations else None,
            dietary=DietaryNeeds.from_payload(dietary) if dietary else None,
            delivery=DeliveryPreference.from_payload(delivery) if delivery else None,
            custom_options=nested_object(data, "custom_options") or {},
        )

    def as_payload(self):
        return compact(
            {
                "size": self.size,
                "servings": self.servings,
                "flavors": list(self.flavors or []),
                "decorations": self.decorations.as_payload() if self.decorations else None,
                "dietary": self.dietary.as_payload() if self.dietary else None,
                "delivery": self.delivery.as_payload() if self.delivery else None,
                "custom_options": dict(self.custom_options or {}),
            }
        )


@messaging.value_object(part_of="CustomRequest")
class ReferenceImage:
    url: String(required=True, max_length=2048)
    description: String(max_length=500, sanitize=False)
    source: String(max_length=200, sanitize=False)

    @invariant.post
    def url_must_be_a_web_address(self):
        if self.url and not is_web_url(self.url):
            raise ValidationError({"url": ["Invalid image URL"]})

    def as_payload(self):
        return compact({"url": self.url, "description": self.description, "source": self.source})


@messaging.value_object(part_of="CustomRequest")
class ReferenceImages:
    images: List(content_type=ValueObject(ReferenceImage))

    @classmethod
    def from_payload(cls, value):
        data = load_object(value, "reference_images")
        if data is None:
            return None
        reject_unknown(data, ("images",), "reference_images", "reference image")
        images = [
            ReferenceImage(url=e.get("url"), description=e.get("description"), source=e.get("source"))
            for e in object_list(data, "images")
        ]
        return cls(images=images)

    def as_payload(self):
        return compact({"images": [image.as_payload() for image in self.images or []]})


def _canonical(payload_cls, value) -> str | None:
    parsed = payload_cls.from_payload(value)
    payload = parsed.as_payload() if parsed else None
    return json.dumps(payload, sort_keys=True) if payload else None


def normalize_specifications(value) -> str | None:
    """Validate specifications given as a dict or JSON text; return JSON or None."""
    return _canonical(Specifications, value)


def normalize_reference_images(value) -> str | None:
    return _canonical(ReferenceImages, value)

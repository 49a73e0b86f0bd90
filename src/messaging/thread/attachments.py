"""Message attachments: files and images linked from a message.

Attachments are stored on the message as JSON text of the shape::

    {"files": [{"url", "name", "size", "type"}],
     "images": [{"url", "alt"?, "width"?, "height"?}]}
"""

import json

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Integer, List, String, ValueObject

from messaging.domain import messaging
from messaging.shared.payload import compact, is_web_url, load_object, object_list, reject_unknown


@messaging.value_object(part_of="MessageThread")
class FileAttachment:
    url: String(required=True, max_length=2048)
    name: String(required=True, max_length=255, sanitize=False)
    size: Integer(required=True, min_value=1)
    mime_type: String(required=True, max_length=100)

    @invariant.post
    def url_must_be_a_web_address(self):
        if self.url and not is_web_url(self.url):
            raise ValidationError({"url": ["Invalid attachment URL"]})

    @classmethod
    def from_payload(cls, entry):
        return cls(url=entry.get("url"), name=entry.get("name"), size=entry.get("size"), mime_type=entry.get("type"))

    def as_payload(self):
        return {"url": self.url, "name": self.name, "size": self.size, "type": self.mime_type}


@messaging.value_object(part_of="MessageThread")
class ImageAttachment:
    url: String(required=True, max_length=2048)
    alt: String(max_length=255, sanitize=False)
    width: Integer(min_value=1)
    height: Integer(min_value=1)

    @invariant.post
    def url_must_be_a_web_address(self):
        if self.url and not is_web_url(self.url):
            raise ValidationError({"url": ["Invalid attachment URL"]})

    @classmethod
    def from_payload(cls, entry):
        return cls(url=entry.get("url"), alt=entry.get("alt"), width=entry.get("width"), height=entry.get("height"))

    def as_payload(self):
        return compact({"url": self.url, "alt": self.alt, "width": self.width, "height": self.height})


@messaging.value_object(part_of="MessageThread")
class Attachments:
    files: List(content_type=ValueObject(FileAttachment))
    images: List(content_type=ValueObject(ImageAttachment))

    @classmethod
    def from_payload(cls, value):
        data = load_object(value, "attachments", "Attachments")
        if data is None:
            return None
        reject_unknown(data, ("files", "images"), "attachments", "attachment")
        return cls(
            files=[FileAttachment.from_payload(entry) for entry in object_list(data, "files")],
            images=[ImageAttachment.from_payload(entry) for entry in object_list(data, "images")],
        )

    def as_payload(self):
        return compact(
            {
                "files": [f.as_payload() for f in self.files or []],
                "images": [i.as_payload() for i in self.images or []],
            }
        )


def normalize_attachments(value) -> str | None:
    """Validate attachments given as a dict or JSON text; return JSON or None."""
    attachments = Attachments.from_payload(value)
    payload = attachments.as_payload() if attachments else None
    return json.dumps(payload, sort_keys=True) if payload else None

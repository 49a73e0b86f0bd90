"""Tag aggregate: dietary, occasion and flavour labels attached to products."""

import re
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Identifier, String

from catalogue.domain import catalogue

COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")


class TagType(Enum):
    DIETARY = "dietary"
    OCCASION = "occasion"
    FLAVOR = "flavor"
    SPECIAL = "special"
    TEXTURE = "texture"
    STYLE = "style"
    OTHER = "other"


@catalogue.event(part_of="Tag")
class TagCreated:
    __version__ = 1

    tag_id: Identifier(required=True)
    name: String(required=True)
    type: String(required=True)
    color: String()


@catalogue.event(part_of="Tag")
class TagUpdated:
    __version__ = 1

    tag_id: Identifier(required=True)
    name: String(required=True)
    type: String(required=True)
    color: String()


@catalogue.aggregate
class Tag:
    name: String(required=True, max_length=100)
    type: String(required=True, choices=TagType)
    color: String(max_length=7)

    @invariant.post
    def color_must_be_hex(self):
        if self.color and not COLOR_PATTERN.match(self.color):
            raise ValidationError({"color": ["Invalid color format"]})

    @classmethod
    def create(cls, name, type, color=None):
        tag = cls(name=name.strip(), type=type, color=color)
        tag.raise_(TagCreated(tag_id=tag.id, name=tag.name, type=tag.type, color=tag.color))
        return tag

    def update(self, name=None, type=None, color=None):
        if name is not None:
            self.name = name.strip()
        if type is not None:
            self.type = type
        if color is not None:
            self.color = color
        self.raise_(TagUpdated(tag_id=self.id, name=self.name, type=self.type, color=self.color))

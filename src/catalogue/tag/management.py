"""Tag management: commands and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.tag.tag import Tag, TagType
from shared.utils.queries import fetch_all


@catalogue.command(part_of="Tag")
class CreateTag:
    name: String(required=True, max_length=100)
    type: String(required=True, choices=TagType)
    color: String(max_length=7)


@catalogue.command(part_of="Tag")
class UpdateTag:
    tag_id: Identifier(required=True)
    name: String(max_length=100)
    type: String(choices=TagType)
    color: String(max_length=7)


def ensure_unique_name(cls, name, exclude_id=None):
    """Names of tags and allergens are unique regardless of case."""
    wanted = name.strip().lower()
    for record in fetch_all(cls):
        if record.name.lower() == wanted and str(record.id) != str(exclude_id):
            raise ValidationError({"name": [f"{cls.__name__} '{name.strip()}' already exists"]})


@catalogue.command_handler(part_of=Tag)
class ManageTagHandler:
    @handle(CreateTag)
    def create_tag(self, command):
        ensure_unique_name(Tag, command.name)
        tag = Tag.create(name=command.name, type=command.type, color=command.color)
        current_domain.repository_for(Tag).add(tag)
        return str(tag.id)

    @handle(UpdateTag)
    def update_tag(self, command):
        repo = current_domain.repository_for(Tag)
        tag = repo.get(command.tag_id)
        if command.name is not None:
            ensure_unique_name(Tag, command.name, exclude_id=tag.id)
        tag.update(name=command.name, type=command.type, color=command.color)
        repo.add(tag)

"""Allergen management: commands and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from catalogue.allergen.allergen import Allergen, Severity
from catalogue.domain import catalogue
from catalogue.tag.management import ensure_unique_name


@catalogue.command(part_of="Allergen")
class CreateAllergen:
    name: String(required=True, max_length=100)
    description: String(max_length=500)
    severity: String(choices=Severity)


@catalogue.command(part_of="Allergen")
class UpdateAllergen:
    allergen_id: Identifier(required=True)
    name: String(max_length=100)
    description: String(max_length=500)
    severity: String(choices=Severity)


@catalogue.command_handler(part_of=Allergen)
class ManageAllergenHandler:
    @handle(CreateAllergen)
    def create_allergen(self, command):
        ensure_unique_name(Allergen, command.name)
        allergen = Allergen.create(
            name=command.name,
            description=command.description,
            severity=command.severity,
        )
        current_domain.repository_for(Allergen).add(allergen)
        return str(allergen.id)

    @handle(UpdateAllergen)
    def update_allergen(self, command):
        repo = current_domain.repository_for(Allergen)
        allergen = repo.get(command.allergen_id)
        if command.name is not None:
            ensure_unique_name(Allergen, command.name, exclude_id=allergen.id)
        allergen.update(
            name=command.name,
            description=command.description,
            severity=command.severity,
        )
        repo.add(allergen)

"""Allergen aggregate: the allergens a bake can declare."""

from enum import Enum

from protean.fields import Identifier, String

from catalogue.domain import catalogue


class Severity(Enum):
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


@catalogue.event(part_of="Allergen")
class AllergenCreated:
    __version__ = 1

    allergen_id: Identifier(required=True)
    name: String(required=True)
    severity: String()


@catalogue.event(part_of="Allergen")
class AllergenUpdated:
    __version__ = 1

    allergen_id: Identifier(required=True)
    name: String(required=True)
    severity: String()


@catalogue.aggregate
class Allergen:
    name: String(required=True, max_length=100)
    description: String(max_length=500)
    severity: String(choices=Severity)

    @classmethod
    def create(cls, name, description=None, severity=None):
        allergen = cls(name=name.strip(), description=description, severity=severity)
        allergen.raise_(AllergenCreated(allergen_id=allergen.id, name=allergen.name, severity=allergen.severity))
        return allergen

    def update(self, name=None, description=None, severity=None):
        if name is not None:
            self.name = name.strip()
        if description is not None:
            self.description = description
        if severity is not None:
            self.severity = severity
        self.raise_(AllergenUpdated(allergen_id=self.id, name=self.name, severity=self.severity))

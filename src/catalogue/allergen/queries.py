from catalogue.allergen.allergen import Allergen
from shared.utils.queries import fetch_all


def allergen_to_dict(allergen: Allergen) -> dict:
    return {
        "id": str(allergen.id),
        "name": allergen.name,
        "description": allergen.description,
        "severity": allergen.severity,
    }


def list_allergens() -> list[dict]:
    return [allergen_to_dict(a) for a in sorted(fetch_all(Allergen), key=lambda a: a.name)]

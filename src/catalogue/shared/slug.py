"""URL slugs for categories and products."""

import re

from protean.exceptions import ValidationError

from shared.utils.queries import fetch_first

SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")


def slugify(text: str) -> str:
    """Derive a slug from a display name.

    "Birthday Cakes & Treats!" becomes "birthday-cakes-treats".
    """
    slug = text.lower()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def validate_slug(slug: str, field: str = "slug") -> str:
    if not slug or len(slug) > 255 or not SLUG_PATTERN.match(slug):
        raise ValidationError({field: ["Slug must contain only lowercase letters, numbers, and hyphens"]})
    return slug


def resolve_slug(name: str, slug: str | None = None) -> str:
    """Use the explicit slug when given, otherwise derive one from ``name``."""
    return validate_slug(slug if slug else slugify(name))


def ensure_unique_slug(cls, slug: str, exclude_id=None) -> None:
    """Reject ``slug`` when another ``cls`` record already uses it."""
    existing = fetch_first(cls, slug=slug)
    if existing is not None and str(existing.id) != str(exclude_id):
        raise ValidationError({"slug": [f"{cls.__name__} with slug '{slug}' already exists"]})

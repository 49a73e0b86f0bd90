"""Starter catalogue: categories, tags, allergens and a handful of bakes.

Seeding goes through the regular commands so every record raises its events.
Records whose name or slug already exists are skipped, so running it twice
is harmless.
"""

import structlog
from protean.utils.globals import current_domain

from catalogue.allergen.allergen import Allergen
from catalogue.allergen.management import CreateAllergen
from catalogue.category.category import Category
from catalogue.category.management import CreateCategory
from catalogue.product.creation import CreateProduct
from catalogue.product.labels import DeclareAllergen, TagProduct
from catalogue.product.product import Product
from catalogue.product.variants import AddVariant
from catalogue.tag.management import CreateTag
from catalogue.tag.tag import Tag
from shared.utils.queries import fetch_all, fetch_first

logger = structlog.get_logger(__name__)

# (name, slug, description, parent slug, sort order)
CATEGORIES = [
    ("Cakes", "cakes", "Delicious cakes for all occasions", None, 1),
    ("Birthday Cakes", "birthday-cakes", "Special cakes for birthday celebrations", "cakes", 1),
    ("Wedding Cakes", "wedding-cakes", "Elegant tiered cakes for your big day", "cakes", 2),
    ("Cheesecakes", "cheesecakes", "Rich and creamy cheesecakes", "cakes", 3),
    ("Celebration Cakes", "celebration-cakes", "Cakes for anniversaries, graduations and more", "cakes", 4),
    ("Cupcakes", "cupcakes", "Individual portion cupcakes", None, 2),
    ("Pastries", "pastries", "Flaky croissants, danishes and tarts", None, 3),
    ("Cookies", "cookies", "Freshly baked cookies", None, 4),
    ("Muffins", "muffins", "Soft and fluffy muffins", None, 5),
    ("Doughnuts", "doughnuts", "Glazed and filled doughnuts", None, 6),
    ("Breads", "breads", "Artisan loaves baked every morning", None, 7),
]

TAGS = [
    ("Gluten-Free", "dietary", "#10B981"),
    ("Vegan", "dietary", "#059669"),
    ("Sugar-Free", "dietary", "#0D9488"),
    ("Dairy-Free", "dietary", "#0891B2"),
    ("Nut-Free", "dietary", "#0284C7"),
    ("Birthday", "occasion", "#DC2626"),
    ("Wedding", "occasion", "#DB2777"),
    ("Anniversary", "occasion", "#C026D3"),
    ("Holiday", "occasion", "#9333EA"),
    ("Corporate", "occasion", "#7C3AED"),
    ("Chocolate", "flavor", "#92400E"),
    ("Vanilla", "flavor", "#F59E0B"),
    ("Strawberry", "flavor", "#EF4444"),
    ("Lemon", "flavor", "#EAB308"),
    ("Caramel", "flavor", "#D97706"),
    ("Best Seller", "special", "#F59E0B"),
    ("New", "special", "#10B981"),
    ("Seasonal", "special", "#8B5CF6"),
]

ALLERGENS = [
    ("Gluten", "Contains wheat, barley, rye, or oats", "moderate"),
    ("Dairy", "Contains milk or milk products", "moderate"),
    ("Eggs", "Contains eggs or egg products", "mild"),
    ("Tree Nuts", "Contains tree nuts", "severe"),
    ("Peanuts", "Contains peanuts or peanut products", "severe"),
    ("Soy", "Contains soy or soy products", "mild"),
    ("Sesame", "Contains sesame seeds", "moderate"),
]

PRODUCTS = [
    {
        "name": "Classic Cheesecake",
        "category": "cheesecakes",
        "description": "Rich and creamy New York style cheesecake with a graham cracker crust.",
        "short_description": "Rich and creamy New York style cheesecake",
        "base_price": 24.99,
        "stock_quantity": 50,
        "min_slices": 8,
        "max_slices": 12,
        "serving_size": "8-12 slices",
        "preparation_time": "24 hours",
        "tags": ["Best Seller", "Vanilla"],
        "allergens": ["Dairy", "Eggs", "Gluten"],
        "variants": [
            ("Strawberry Cheesecake - Small", "CHEESE-STRAW-SM", 22.99, "Strawberry", "Small", "Classic", False),
            ("Chocolate Cheesecake - Large", "CHEESE-CHOC-LG", 28.99, "Chocolate", "Large", "Premium", False),
            ("Classic Cheesecake - Individual", "CHEESE-CLASSIC-IND", 4.99, "Classic", "Individual", "Classic", True),
        ],
    },
    {
        "name": "Chocolate Birthday Cake",
        "category": "birthday-cakes",
        "description": "Decadent three-layer chocolate cake with rich chocolate buttercream frosting.",
        "short_description": "Three-layer chocolate cake with buttercream",
        "base_price": 32.99,
        "stock_quantity": 30,
        "min_slices": 10,
        "max_slices": 16,
        "serving_size": "10-16 slices",
        "preparation_time": "4 hours",
        "tags": ["Birthday", "Chocolate"],
        "allergens": ["Dairy", "Eggs", "Gluten"],
        "variants": [],
    },
    {
        "name": "Chocolate Chip Cookies",
        "category": "cookies",
        "description": "Freshly baked chocolate chip cookies with premium chocolate chips.",
        "short_description": "Soft and chewy chocolate chip cookies",
        "base_price": 12.99,
        "stock_quantity": 200,
        "min_slices": 12,
        "max_slices": 24,
        "serving_size": "12-24 cookies",
        "preparation_time": "1 hour",
        "tags": ["Chocolate", "Best Seller"],
        "allergens": ["Gluten", "Dairy"],
        "variants": [
            ("Chocolate Chip Cookies - Dozen", "COOKIE-CHOC-12", 12.99, "Chocolate Chip", "Dozen", "Classic", True),
            ("Oatmeal Cookies - Half Dozen", "COOKIE-OATMEAL-6", 7.99, "Oatmeal", "Half Dozen", "Classic", False),
        ],
    },
    {
        "name": "Vegan Lemon Muffins",
        "category": "muffins",
        "description": "Fluffy plant-based muffins with fresh lemon zest.",
        "short_description": "Plant-based lemon muffins",
        "base_price": 15.99,
        "stock_quantity": 80,
        "min_slices": 6,
        "max_slices": 12,
        "serving_size": "6-12 muffins",
        "preparation_time": "1.5 hours",
        "tags": ["Vegan", "Dairy-Free", "Lemon"],
        "allergens": ["Gluten"],
        "variants": [],
    },
]


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _seed_categories() -> int:
    created = 0
    for name, slug, description, parent_slug, sort_order in CATEGORIES:
        if fetch_first(Category, slug=slug) is not None:
            continue
        parent = fetch_first(Category, slug=parent_slug) if parent_slug else None
        _process(
            CreateCategory(
                name=name,
                slug=slug,
                description=description,
                parent_id=parent.id if parent else None,
                sort_order=sort_order,
            )
        )
        created += 1
    return created


def _ids_by_name(cls) -> dict[str, str]:
    return {record.name.lower(): str(record.id) for record in fetch_all(cls)}


def _seed_tags() -> int:
    existing = _ids_by_name(Tag)
    missing = [(n, t, c) for n, t, c in TAGS if n.lower() not in existing]
    for name, tag_type, color in missing:
        _process(CreateTag(name=name, type=tag_type, color=color))
    return len(missing)


def _seed_allergens() -> int:
    existing = _ids_by_name(Allergen)
    missing = [(n, d, s) for n, d, s in ALLERGENS if n.lower() not in existing]
    for name, description, severity in missing:
        _process(CreateAllergen(name=name, description=description, severity=severity))
    return len(missing)


def _seed_products() -> int:
    tags = _ids_by_name(Tag)
    allergens = _ids_by_name(Allergen)
    created = 0

    for spec in PRODUCTS:
        if fetch_first(Product, name=spec["name"]) is not None:
            continue
        category = fetch_first(Category, slug=spec["category"])
        product_id = _process(
            CreateProduct(
                name=spec["name"],
                description=spec["description"],
                short_description=spec["short_description"],
                category_id=category.id if category else None,
                base_price=spec["base_price"],
                stock_quantity=spec["stock_quantity"],
                min_slices=spec["min_slices"],
                max_slices=spec["max_slices"],
                serving_size=spec["serving_size"],
                preparation_time=spec["preparation_time"],
            )
        )
        for name, sku, price, flavor, size, variant_type, is_default in spec["variants"]:
            _process(
                AddVariant(
                    product_id=product_id,
                    name=name,
                    sku=sku,
                    price=price,
                    flavor=flavor,
                    size=size,
                    type=variant_type,
                    is_default=is_default,
                )
            )
        for tag_name in spec["tags"]:
            _process(TagProduct(product_id=product_id, tag_id=tags[tag_name.lower()]))
        for allergen_name in spec["allergens"]:
            _process(DeclareAllergen(product_id=product_id, allergen_id=allergens[allergen_name.lower()]))
        created += 1

    return created


def seed_catalogue() -> dict:
    """Load the starter catalogue into the active ``catalogue`` domain context."""
    counts = {
        "categories": _seed_categories(),
        "tags": _seed_tags(),
        "allergens": _seed_allergens(),
        "products": _seed_products(),
    }
    logger.info("Catalogue seeded", **counts)
    return counts

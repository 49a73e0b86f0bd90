"""Application tests for storefront search and filter facets."""

import pytest
from catalogue.allergen.management import CreateAllergen
from catalogue.category.management import CreateCategory
from catalogue.product.creation import CreateProduct
from catalogue.product.labels import DeclareAllergen, TagProduct
from catalogue.product.variants import AddVariant
from catalogue.search.facets import (
    dietary_tags,
    filter_facets,
    filter_suggestions,
    occasion_tags,
    popular_tags,
)
from catalogue.search.search import ProductFilters, product_count, search_products
from catalogue.tag.management import CreateTag
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _names(result):
    return [p["name"] for p in result["products"]]


@pytest.fixture()
def menu():
    """A small menu: three cakes, a cookie box and a retired bake."""
    ids = {
        "cakes": _process(CreateCategory(name="Cakes")),
        "cookies": _process(CreateCategory(name="Cookies")),
        "vegan": _process(CreateTag(name="Vegan", type="dietary")),
        "birthday": _process(CreateTag(name="Birthday", type="occasion")),
        "chocolate": _process(CreateTag(name="Chocolate", type="flavor")),
        "gluten": _process(CreateAllergen(name="Gluten", severity="moderate")),
        "nuts": _process(CreateAllergen(name="Tree Nuts", severity="severe")),
    }

    def product(name, price, category, stock=10, min_slices=None, max_slices=None, tags=(), allergens=(), **extra):
        product_id = _process(
            CreateProduct(
                name=name,
                base_price=price,
                category_id=ids[category],
                stock_quantity=stock,
                min_slices=min_slices,
                max_slices=max_slices,
                **extra,
            )
        )
        for tag in tags:
            _process(TagProduct(product_id=product_id, tag_id=ids[tag]))
        for allergen, contains in allergens:
            _process(
                DeclareAllergen(
                    product_id=product_id,
                    allergen_id=ids[allergen],
                    contains_allergen=contains,
                    may_contain=not contains,
                )
            )
        ids[name] = product_id
        return product_id

    chocolate = product(
        "Chocolate Birthday Cake",
        32.99,
        "cakes",
        min_slices=10,
        max_slices=16,
        tags=("birthday", "chocolate"),
        allergens=(("gluten", True),),
        description="Three layers of chocolate sponge",
    )
    _process(AddVariant(product_id=chocolate, name="Large", price=40, flavor="Chocolate", size="Large"))
    _process(
        AddVariant(product_id=chocolate, name="Small", price=25, flavor="Vanilla", size="Small", is_available=False)
    )

    product(
        "Vegan Carrot Cake",
        24.0,
        "cakes",
        stock=0,
        min_slices=8,
        max_slices=12,
        tags=("vegan",),
        allergens=(("nuts", False),),
        short_description="Walnut-topped and dairy free",
    )
    product("Lemon Drizzle", 18.5, "cakes", min_slices=6, max_slices=8, tags=("vegan", "birthday"))
    cookies = product("Cookie Box", 12.99, "cookies", tags=("chocolate",), allergens=(("gluten", True), ("nuts", True)))
    _process(AddVariant(product_id=cookies, name="Dozen", price=12.99, flavor="Chocolate", size="Dozen"))
    product("Retired Scone", 3.0, "cookies", is_active=False, tags=("vegan",))
    return ids


class TestSearchProducts:
    def test_active_products_newest_first(self, menu):
        result = search_products()
        assert result["total"] == 4
        assert _names(result) == ["Cookie Box", "Lemon Drizzle", "Vegan Carrot Cake", "Chocolate Birthday Cake"]
        assert result["has_more"] is False

    def test_text_query_searches_name_and_descriptions(self, menu):
        assert _names(search_products(ProductFilters(query="CAKE"), sort="name", direction="asc")) == [
            "Chocolate Birthday Cake",
            "Vegan Carrot Cake",
        ]
        assert _names(search_products(ProductFilters(query="sponge"))) == ["Chocolate Birthday Cake"]
        assert _names(search_products(ProductFilters(query="walnut"))) == ["Vegan Carrot Cake"]

    def test_category_by_id_and_slug(self, menu):
        assert product_count(ProductFilters(category_id=menu["cookies"])) == 1
        assert product_count(ProductFilters(category_slug="cakes")) == 3
        assert product_count(ProductFilters(category_slug="pies")) == 0

    def test_price_range(self, menu):
        result = search_products(ProductFilters(price_min=15, price_max=25), sort="price", direction="asc")
        assert _names(result) == ["Lemon Drizzle", "Vegan Carrot Cake"]

    def test_slice_bounds(self, menu):
        assert _names(search_products(ProductFilters(min_slices=8), sort="name", direction="asc")) == [
            "Chocolate Birthday Cake",
            "Cookie Box",
            "Vegan Carrot Cake",
        ]
        assert _names(search_products(ProductFilters(max_slices=12), sort="name", direction="asc")) == [
            "Cookie Box",
            "Lemon Drizzle",
            "Vegan Carrot Cake",
        ]

    def test_in_stock(self, menu):
        assert "Vegan Carrot Cake" not in _names(search_products(ProductFilters(in_stock=True)))

    def test_tags_require_all(self, menu):
        result = search_products(ProductFilters(tags=[menu["vegan"], menu["birthday"]]))
        assert _names(result) == ["Lemon Drizzle"]

    def test_allergen_free_ignores_may_contain(self, menu):
        result = search_products(ProductFilters(allergen_free=[menu["nuts"]]), sort="name", direction="asc")
        assert _names(result) == ["Chocolate Birthday Cake", "Lemon Drizzle", "Vegan Carrot Cake"]

    def test_variant_filters_use_available_variants(self, menu):
        assert _names(search_products(ProductFilters(flavor="Chocolate"), sort="name", direction="asc")) == [
            "Chocolate Birthday Cake",
            "Cookie Box",
        ]
        assert product_count(ProductFilters(flavor="Vanilla")) == 0
        assert product_count(ProductFilters(flavor="Chocolate", size="Large")) == 1

    def test_pagination(self, menu):
        result = search_products(sort="price", direction="desc", limit=2, offset=1)
        assert _names(result) == ["Vegan Carrot Cake", "Lemon Drizzle"]
        assert result["total"] == 4
        assert result["has_more"] is True

    def test_results_are_enriched(self, menu):
        (cake,) = search_products(ProductFilters(query="drizzle"))["products"]
        assert cake["category"]["slug"] == "cakes"
        assert {t["name"] for t in cake["tags"]} == {"Vegan", "Birthday"}

    def test_invalid_filters(self, menu):
        with pytest.raises(ValidationError):
            search_products(ProductFilters(price_min=-1))
        with pytest.raises(ValidationError):
            search_products(ProductFilters(price_min=30, price_max=10))
        with pytest.raises(ValidationError):
            search_products(ProductFilters(query="x" * 256))

    def test_invalid_sort(self, menu):
        with pytest.raises(ValidationError):
            search_products(sort="rating")
        with pytest.raises(ValidationError):
            search_products(direction="sideways")


class TestFacets:
    def test_filter_facets(self, menu):
        facets = filter_facets()

        assert [(c["name"], c["count"]) for c in facets["categories"]] == [("Cakes", 3), ("Cookies", 1)]
        tags = {t["name"]: t["count"] for t in facets["tags"]}
        assert tags == {"Vegan": 2, "Birthday": 2, "Chocolate": 2}
        allergens = {a["name"]: a["count"] for a in facets["allergens"]}
        assert allergens == {"Gluten": 2, "Tree Nuts": 1}
        assert facets["price_range"] == {"min": 12.99, "max": 32.99}
        assert facets["flavors"] == [{"id": "Chocolate", "name": "Chocolate", "count": 2}]
        assert {s["name"] for s in facets["sizes"]} == {"Large", "Dozen"}

    def test_facets_narrowed_to_category(self, menu):
        facets = filter_facets(menu["cookies"])
        assert [c["name"] for c in facets["categories"]] == ["Cookies"]
        assert facets["price_range"] == {"min": 12.99, "max": 12.99}

    def test_empty_catalogue(self):
        facets = filter_facets()
        assert facets["price_range"] == {"min": 0.0, "max": 0.0}
        assert facets["tags"] == []

    def test_tag_groups(self, menu):
        assert [t["name"] for t in dietary_tags()] == ["Vegan"]
        assert [t["name"] for t in occasion_tags()] == ["Birthday"]
        assert [t["name"] for t in popular_tags(limit=2)] == ["Birthday", "Chocolate"]

    def test_suggestions_skip_selected_tags(self, menu):
        suggestions = filter_suggestions(tag_ids=[menu["vegan"]])
        assert "Vegan" not in [t["name"] for t in suggestions["suggested_tags"]]
        assert [c["name"] for c in suggestions["related_categories"]] == ["Cakes", "Cookies"]

    def test_suggestions_within_category_have_no_related_categories(self, menu):
        assert filter_suggestions(category_id=menu["cakes"])["related_categories"] == []

"""Application tests for product read models: detail pages, recommendations and admin listings."""

import pytest
from catalogue.allergen.management import CreateAllergen
from catalogue.category.management import CreateCategory
from catalogue.product.creation import CreateProduct
from catalogue.product.images import AddProductImage
from catalogue.product.labels import DeclareAllergen, TagProduct
from catalogue.product.queries import (
    admin_products,
    featured_products,
    product_by_id,
    product_by_slug,
    product_stats,
    products_by_dietary_needs,
    recommended_products,
)
from catalogue.product.variants import AddVariant
from catalogue.seed import seed_catalogue
from catalogue.tag.management import CreateTag
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _create_product(name, **overrides):
    defaults = {"name": name, "base_price": 20.0, "stock_quantity": 10}
    defaults.update(overrides)
    return _process(CreateProduct(**defaults))


class TestProductDetail:
    def test_by_slug_includes_children(self):
        category_id = _process(CreateCategory(name="Cheesecakes"))
        product_id = _create_product("Classic Cheesecake", category_id=category_id)
        _process(AddVariant(product_id=product_id, name="Large", price=28.99))
        _process(AddVariant(product_id=product_id, name="Individual", price=4.99, is_default=True))
        _process(AddProductImage(product_id=product_id, url="https://cdn.example.com/1.jpg", sort_order=3))
        _process(AddProductImage(product_id=product_id, url="https://cdn.example.com/2.jpg", sort_order=1))
        allergen_id = _process(CreateAllergen(name="Dairy", severity="moderate"))
        _process(DeclareAllergen(product_id=product_id, allergen_id=allergen_id))

        product = product_by_slug("classic-cheesecake")

        assert product["id"] == product_id
        assert product["category"]["name"] == "Cheesecakes"
        assert [v["name"] for v in product["variants"]] == ["Individual", "Large"]
        assert [i["url"] for i in product["images"]] == [
            "https://cdn.example.com/1.jpg",
            "https://cdn.example.com/2.jpg",
        ]
        assert product["allergens"] == [
            {"id": allergen_id, "name": "Dairy", "severity": "moderate", "contains_allergen": True, "may_contain": False}
        ]

    def test_unknown_product(self):
        assert product_by_slug("nope") is None
        assert product_by_id("missing") is None


class TestFeaturedProducts:
    def test_only_active_in_stock_newest_first(self):
        _create_product("Old Favourite")
        _create_product("Sold Out", stock_quantity=0)
        _create_product("Hidden", is_active=False)
        _create_product("Fresh Bake")

        assert [p["name"] for p in featured_products()] == ["Fresh Bake", "Old Favourite"]
        assert len(featured_products(limit=1)) == 1


class TestRecommendations:
    def test_shared_tags_rank_first(self):
        cakes = _process(CreateCategory(name="Cakes"))
        chocolate = _process(CreateTag(name="Chocolate", type="flavor"))
        birthday = _process(CreateTag(name="Birthday", type="occasion"))

        source = _create_product("Chocolate Birthday Cake", category_id=cakes)
        for tag_id in (chocolate, birthday):
            _process(TagProduct(product_id=source, tag_id=tag_id))

        same_category = _create_product("Carrot Cake", category_id=cakes)
        two_tags = _create_product("Chocolate Party Cupcakes")
        for tag_id in (chocolate, birthday):
            _process(TagProduct(product_id=two_tags, tag_id=tag_id))
        one_tag = _create_product("Chocolate Cookies")
        _process(TagProduct(product_id=one_tag, tag_id=chocolate))
        _create_product("Plain Bread")

        names = [p["name"] for p in recommended_products(source)]
        assert names == ["Chocolate Party Cupcakes", "Chocolate Cookies", "Carrot Cake"]
        assert same_category in [p["id"] for p in recommended_products(source)]

    def test_unknown_product(self):
        assert recommended_products("missing") == []


class TestDietaryNeeds:
    def test_tags_and_allergen_exclusions(self):
        vegan = _process(CreateTag(name="Vegan", type="dietary"))
        nuts = _process(CreateAllergen(name="Tree Nuts", severity="severe"))

        muffins = _create_product("Vegan Muffins")
        _process(TagProduct(product_id=muffins, tag_id=vegan))
        brownies = _create_product("Vegan Walnut Brownies")
        _process(TagProduct(product_id=brownies, tag_id=vegan))
        _process(DeclareAllergen(product_id=brownies, allergen_id=nuts))
        _create_product("Butter Cake")

        assert {p["name"] for p in products_by_dietary_needs(["vegan"])} == {"Vegan Muffins", "Vegan Walnut Brownies"}
        assert [p["name"] for p in products_by_dietary_needs(["Vegan"], allergen_free=[nuts])] == ["Vegan Muffins"]
        assert products_by_dietary_needs(["Keto"]) == []


class TestAdminProducts:
    def test_search_sort_and_paginate(self):
        _create_product("Banana Bread", base_price=9.0, description="Moist loaf")
        _create_product("Apple Pie", base_price=15.0)
        _create_product("Cherry Tart", base_price=12.0, is_active=False)

        by_price = admin_products(sort_by="price", sort_order="asc")
        assert [p["name"] for p in by_price["products"]] == ["Banana Bread", "Cherry Tart", "Apple Pie"]

        assert admin_products(search="loaf")["total"] == 1
        assert admin_products(is_active=False)["products"][0]["name"] == "Cherry Tart"

        page = admin_products(sort_by="name", sort_order="asc", limit=2, offset=0)
        assert [p["name"] for p in page["products"]] == ["Apple Pie", "Banana Bread"]
        assert page["has_more"] is True

    def test_unknown_sort_field(self):
        with pytest.raises(ValidationError):
            admin_products(sort_by="stock")


def test_product_stats():
    _create_product("Plenty", stock_quantity=50)
    _create_product("Nearly Gone", stock_quantity=5)
    _create_product("Sold Out", stock_quantity=0)
    _create_product("Hidden", stock_quantity=0, is_active=False)

    assert product_stats() == {"total": 4, "active": 3, "low_stock": 1, "out_of_stock": 1}


class TestSeed:
    def test_seed_loads_starter_catalogue(self):
        counts = seed_catalogue()

        assert counts == {"categories": 11, "tags": 18, "allergens": 7, "products": 4}
        cheesecake = product_by_slug("classic-cheesecake")
        assert cheesecake["category"]["slug"] == "cheesecakes"
        assert len(cheesecake["variants"]) == 3
        assert cheesecake["variants"][0]["is_default"] is True

    def test_seed_twice_is_harmless(self):
        seed_catalogue()
        assert seed_catalogue() == {"categories": 0, "tags": 0, "allergens": 0, "products": 0}

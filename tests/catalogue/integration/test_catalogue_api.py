"""Integration tests for the Catalogue API endpoints via TestClient."""

import pytest
from catalogue.api import allergen_router, category_router, product_router, tag_router
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.integrations.fastapi import register_exception_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    for router in (category_router, product_router, tag_router, allergen_router):
        app.include_router(router)
    register_exception_handlers(app)
    return TestClient(app)


def _create(client, path, payload):
    response = client.post(path, json=payload)
    assert response.status_code == 201, response.text
    return response.json()["id"]


class TestCategoryAPI:
    def test_create_and_browse(self, client):
        cakes = _create(client, "/categories", {"name": "Cakes", "sort_order": 1})
        birthday = _create(client, "/categories", {"name": "Birthday Cakes", "parent_id": cakes})

        tree = client.get("/categories/tree").json()
        assert tree[0]["slug"] == "cakes"
        assert tree[0]["children"][0]["id"] == birthday

        assert client.get("/categories/slug/birthday-cakes").json()["parent_id"] == cakes
        assert [c["name"] for c in client.get(f"/categories/{birthday}/breadcrumb").json()] == [
            "Cakes",
            "Birthday Cakes",
        ]
        assert [c["id"] for c in client.get(f"/categories/{cakes}/subcategories").json()] == [birthday]

    def test_unknown_slug_returns_404(self, client):
        assert client.get("/categories/slug/pies").status_code == 404

    def test_duplicate_slug_returns_400(self, client):
        _create(client, "/categories", {"name": "Cakes"})
        assert client.post("/categories", json={"name": "Cakes"}).status_code == 400

    def test_cycle_rejected(self, client):
        cakes = _create(client, "/categories", {"name": "Cakes"})
        birthday = _create(client, "/categories", {"name": "Birthday Cakes", "parent_id": cakes})

        response = client.put(f"/categories/{cakes}", json={"parent_id": birthday})
        assert response.status_code == 400

    def test_reorder_and_delete(self, client):
        cakes = _create(client, "/categories", {"name": "Cakes"})
        cookies = _create(client, "/categories", {"name": "Cookies"})

        response = client.post("/categories/reorder", json={"orders": [{"id": cakes, "sort_order": 5}]})
        assert response.json() == {"count": 1}
        assert [c["id"] for c in client.get("/categories").json()] == [cookies, cakes]

        assert client.delete(f"/categories/{cookies}").json() == {"status": "deleted"}
        assert client.get("/categories/roots").json()[0]["id"] == cakes

    def test_parent_options(self, client):
        cakes = _create(client, "/categories", {"name": "Cakes"})
        _create(client, "/categories", {"name": "Birthday Cakes", "parent_id": cakes})
        cookies = _create(client, "/categories", {"name": "Cookies"})

        options = client.get("/categories/parent-options", params={"category_id": cakes}).json()
        assert [o["id"] for o in options] == [cookies]


class TestProductAPI:
    def test_create_and_fetch(self, client):
        product_id = _create(client, "/products", {"name": "Carrot Cake", "base_price": 22.5, "stock_quantity": 4})

        assert client.get(f"/products/{product_id}").json()["name"] == "Carrot Cake"
        assert client.get("/products/slug/carrot-cake").json()["id"] == product_id
        assert client.get("/products/missing").status_code == 404

    def test_negative_price_returns_422(self, client):
        assert client.post("/products", json={"name": "Free Cake", "base_price": -1}).status_code == 422

    def test_update_and_stock(self, client):
        product_id = _create(client, "/products", {"name": "Carrot Cake", "base_price": 22.5, "stock_quantity": 4})

        assert client.put(f"/products/{product_id}", json={"base_price": 24}).status_code == 200
        response = client.post(f"/products/{product_id}/stock", json={"quantity_change": -10})
        assert response.json() == {"stock_quantity": 0}

        product = client.get(f"/products/{product_id}").json()
        assert product["base_price"] == 24.0
        assert product["stock_quantity"] == 0

    def test_variants_images_and_labels(self, client):
        product_id = _create(client, "/products", {"name": "Carrot Cake", "base_price": 22.5})
        tag_id = _create(client, "/tags", {"name": "Vegan", "type": "dietary", "color": "#059669"})
        allergen_id = _create(client, "/allergens", {"name": "Tree Nuts", "severity": "severe"})

        variant_id = _create(
            client,
            f"/products/{product_id}/variants",
            {"name": "Large", "price": 30, "size": "Large", "attributes": {"tiers": 2}},
        )
        _create(client, f"/products/{product_id}/images", {"url": "https://cdn.example.com/carrot.jpg"})
        assert client.post(f"/products/{product_id}/tags", json={"tag_id": tag_id}).status_code == 201
        response = client.put(f"/products/{product_id}/allergens/{allergen_id}", json={"may_contain": True})
        assert response.status_code == 200

        product = client.get(f"/products/{product_id}").json()
        assert product["variants"][0]["attributes"] == {"tiers": 2}
        assert product["images"][0]["is_main"] is True
        assert product["tags"][0]["name"] == "Vegan"
        assert product["allergens"][0]["may_contain"] is True

        client.put(f"/products/{product_id}/variants/{variant_id}", json={"price": 32})
        assert client.get(f"/products/{product_id}").json()["variants"][0]["price"] == 32.0
        assert client.delete(f"/products/{product_id}/variants/{variant_id}").status_code == 200
        assert client.delete(f"/products/{product_id}/tags/{tag_id}").status_code == 200
        assert client.delete(f"/products/{product_id}/allergens/{allergen_id}").status_code == 200

        product = client.get(f"/products/{product_id}").json()
        assert product["variants"] == product["tags"] == product["allergens"] == []

    def test_tagging_twice_returns_400(self, client):
        product_id = _create(client, "/products", {"name": "Carrot Cake", "base_price": 22.5})
        tag_id = _create(client, "/tags", {"name": "Vegan", "type": "dietary"})
        client.post(f"/products/{product_id}/tags", json={"tag_id": tag_id})

        assert client.post(f"/products/{product_id}/tags", json={"tag_id": tag_id}).status_code == 400

    def test_search_count_and_facets(self, client):
        _create(client, "/products", {"name": "Carrot Cake", "base_price": 22.5, "stock_quantity": 3})
        _create(client, "/products", {"name": "Lemon Cake", "base_price": 18.0})
        _create(client, "/products", {"name": "Shortbread", "base_price": 6.0, "stock_quantity": 10})

        result = client.get("/products", params={"q": "cake", "sort": "price", "direction": "asc"}).json()
        assert [p["name"] for p in result["products"]] == ["Lemon Cake", "Carrot Cake"]
        assert client.get("/products/count", params={"price_min": 10}).json() == {"count": 2}
        assert client.get("/products/facets").json()["price_range"] == {"min": 6.0, "max": 22.5}
        assert [p["name"] for p in client.get("/products/featured").json()] == ["Shortbread", "Carrot Cake"]

    def test_bad_search_returns_400(self, client):
        assert client.get("/products", params={"sort": "rating"}).status_code == 400

    def test_bulk_and_admin(self, client):
        ids = [
            _create(client, "/products", {"name": name, "base_price": 10})
            for name in ("Carrot Cake", "Lemon Cake")
        ]

        response = client.post("/products/bulk", json={"product_ids": ids, "operation": "deactivate"})
        assert response.json() == {"count": 2}
        assert client.get("/products/admin", params={"is_active": False}).json()["total"] == 2
        assert client.get("/products/stats").json()["active"] == 0

        response = client.post("/products/bulk", json={"product_ids": ids, "operation": "archive"})
        assert response.status_code == 422

    def test_delete(self, client):
        product_id = _create(client, "/products", {"name": "Carrot Cake", "base_price": 10})
        assert client.delete(f"/products/{product_id}").json() == {"status": "deleted"}
        assert client.get(f"/products/{product_id}").status_code == 404


class TestTagAndAllergenAPI:
    def test_tags(self, client):
        tag_id = _create(client, "/tags", {"name": "Vegan", "type": "dietary"})
        _create(client, "/tags", {"name": "Birthday", "type": "occasion"})

        assert [t["name"] for t in client.get("/tags", params={"type": "occasion"}).json()] == ["Birthday"]
        assert client.put(f"/tags/{tag_id}", json={"name": "Plant Based"}).status_code == 200
        assert client.post("/tags", json={"name": "birthday", "type": "occasion"}).status_code == 400
        assert client.post("/tags", json={"name": "Bad", "type": "dietary", "color": "red"}).status_code == 422

    def test_allergens(self, client):
        allergen_id = _create(client, "/allergens", {"name": "Soy", "severity": "mild"})
        assert client.put(f"/allergens/{allergen_id}", json={"severity": "moderate"}).status_code == 200
        assert client.get("/allergens").json()[0]["severity"] == "moderate"

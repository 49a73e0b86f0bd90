"""Tests for product image management and the main-image invariant."""

import pytest
from catalogue.product.events import MainImageChanged
from catalogue.product.product import MAX_IMAGES, Product
from protean.exceptions import ValidationError


@pytest.fixture()
def product():
    return Product.create(name="Chocolate Birthday Cake", base_price=32.99)


def _main(product):
    return [i for i in product.images if i.is_main]


class TestAddImage:
    def test_first_image_becomes_main(self, product):
        image = product.add_image(url="https://cdn.example.com/cake-1.jpg")
        assert image.is_main is True

    def test_later_images_are_not_main(self, product):
        product.add_image(url="https://cdn.example.com/cake-1.jpg")
        second = product.add_image(url="https://cdn.example.com/cake-2.jpg")

        assert second.is_main is False
        assert len(_main(product)) == 1

    def test_new_main_demotes_previous(self, product):
        first = product.add_image(url="https://cdn.example.com/cake-1.jpg")
        second = product.add_image(url="https://cdn.example.com/cake-2.jpg", is_main=True)

        assert first.is_main is False
        assert second.is_main is True

    def test_image_limit(self, product):
        for i in range(MAX_IMAGES):
            product.add_image(url=f"https://cdn.example.com/cake-{i}.jpg")

        with pytest.raises(ValidationError) as exc:
            product.add_image(url="https://cdn.example.com/one-too-many.jpg")
        assert exc.value.messages["images"] == [f"Cannot have more than {MAX_IMAGES} images"]


class TestSetMainImage:
    def test_switch_main(self, product):
        first = product.add_image(url="https://cdn.example.com/cake-1.jpg")
        second = product.add_image(url="https://cdn.example.com/cake-2.jpg")
        product._events.clear()

        product.set_main_image(second.id)

        assert first.is_main is False
        assert second.is_main is True
        event = product._events[0]
        assert isinstance(event, MainImageChanged)
        assert event.previous_image_id == first.id

    def test_already_main_is_a_no_op(self, product):
        first = product.add_image(url="https://cdn.example.com/cake-1.jpg")
        product._events.clear()

        product.set_main_image(first.id)

        assert product._events == []

    def test_unknown_image_rejected(self, product):
        with pytest.raises(ValidationError):
            product.set_main_image("missing")


class TestRemoveImage:
    def test_removing_main_promotes_lowest_sort_order(self, product):
        main = product.add_image(url="https://cdn.example.com/a.jpg", sort_order=0)
        product.add_image(url="https://cdn.example.com/b.jpg", sort_order=5)
        third = product.add_image(url="https://cdn.example.com/c.jpg", sort_order=2)

        product.remove_image(main.id)

        assert len(product.images) == 2
        assert _main(product) == [third]

    def test_removing_other_image_keeps_main(self, product):
        main = product.add_image(url="https://cdn.example.com/a.jpg")
        other = product.add_image(url="https://cdn.example.com/b.jpg")

        product.remove_image(other.id)

        assert _main(product) == [main]

    def test_removing_last_image(self, product):
        only = product.add_image(url="https://cdn.example.com/a.jpg")
        product.remove_image(only.id)
        assert product.images == []

"""Catalogue domain API package."""

from catalogue.api.routes import allergen_router, category_router, product_router, tag_router

__all__ = ["category_router", "product_router", "tag_router", "allergen_router"]

"""FastAPI endpoints for the Catalogue domain."""

import json

from fastapi import APIRouter, HTTPException, Query
from protean.utils.globals import current_domain

from catalogue.allergen.management import CreateAllergen, UpdateAllergen
from catalogue.allergen.queries import list_allergens
from catalogue.api.schemas import (
    AdjustStockRequest,
    AllergenDeclarationRequest,
    AllergenRequest,
    BulkUpdateRequest,
    CountResponse,
    CreateCategoryRequest,
    CreateProductRequest,
    IdResponse,
    ImageRequest,
    ReorderCategoriesRequest,
    StatusResponse,
    TagLinkRequest,
    TagRequest,
    UpdateAllergenRequest,
    UpdateCategoryRequest,
    UpdateProductRequest,
    UpdateTagRequest,
    UpdateVariantRequest,
    VariantRequest,
)
from catalogue.category.management import (
    CreateCategory,
    DeleteCategory,
    ReorderCategories,
    UpdateCategory,
)
from catalogue.category.queries import (
    admin_categories,
    categories_with_stats,
    category_breadcrumb,
    category_by_slug,
    category_tree,
    parent_options,
    root_categories,
    subcategories,
)
from catalogue.product.creation import CreateProduct
from catalogue.product.details import AdjustStock, UpdateProduct
from catalogue.product.images import AddProductImage, RemoveProductImage, SetMainImage
from catalogue.product.labels import DeclareAllergen, RemoveAllergen, TagProduct, UntagProduct
from catalogue.product.lifecycle import BulkUpdateProducts, DeleteProduct
from catalogue.product.queries import (
    admin_products,
    featured_products,
    product_by_id,
    product_by_slug,
    product_stats,
    products_by_dietary_needs,
    recommended_products,
)
from catalogue.product.variants import AddVariant, RemoveVariant, UpdateVariant
from catalogue.search.facets import (
    dietary_tags,
    filter_facets,
    filter_suggestions,
    occasion_tags,
    popular_tags,
)
from catalogue.search.search import ProductFilters, product_count, search_products
from catalogue.tag.management import CreateTag, UpdateTag
from catalogue.tag.queries import list_tags

category_router = APIRouter(prefix="/categories", tags=["categories"])
product_router = APIRouter(prefix="/products", tags=["products"])
tag_router = APIRouter(prefix="/tags", tags=["tags"])
allergen_router = APIRouter(prefix="/allergens", tags=["allergens"])


def _process(command):
    return current_domain.process(command, asynchronous=False)


# --- Category endpoints ---


@category_router.get("")
async def list_categories() -> list[dict]:
    return categories_with_stats()


@category_router.get("/tree")
async def get_category_tree() -> list[dict]:
    return category_tree()


@category_router.get("/roots")
async def get_root_categories() -> list[dict]:
    return root_categories()


@category_router.get("/admin")
async def get_admin_categories() -> list[dict]:
    return admin_categories()


@category_router.get("/parent-options")
async def get_parent_options(category_id: str | None = None) -> list[dict]:
    return parent_options(category_id)


@category_router.get("/slug/{slug}")
async def get_category_by_slug(slug: str) -> dict:
    category = category_by_slug(slug)
    if category is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@category_router.get("/{category_id}/subcategories")
async def get_subcategories(category_id: str) -> list[dict]:
    return subcategories(category_id)


@category_router.get("/{category_id}/breadcrumb")
async def get_breadcrumb(category_id: str) -> list[dict]:
    return category_breadcrumb(category_id)


@category_router.post("", status_code=201, response_model=IdResponse)
async def create_category(body: CreateCategoryRequest) -> IdResponse:
    result = _process(CreateCategory(**body.model_dump()))
    return IdResponse(id=result)


@category_router.post("/reorder", response_model=CountResponse)
async def reorder_categories(body: ReorderCategoriesRequest) -> CountResponse:
    orders = json.dumps([order.model_dump() for order in body.orders])
    changed = _process(ReorderCategories(orders=orders))
    return CountResponse(count=changed)


@category_router.put("/{category_id}", response_model=StatusResponse)
async def update_category(category_id: str, body: UpdateCategoryRequest) -> StatusResponse:
    _process(UpdateCategory(category_id=category_id, **body.model_dump()))
    return StatusResponse()


@category_router.delete("/{category_id}", response_model=StatusResponse)
async def delete_category(category_id: str) -> StatusResponse:
    _process(DeleteCategory(category_id=category_id))
    return StatusResponse(status="deleted")


# --- Product read endpoints ---


def _filters(
    q: str | None = None,
    category_id: str | None = None,
    category_slug: str | None = None,
    price_min: float | None = None,
    price_max: float | None = None,
    min_slices: int | None = None,
    max_slices: int | None = None,
    in_stock: bool | None = None,
    tags: list[str] | None = None,
    allergen_free: list[str] | None = None,
    flavor: str | None = None,
    size: str | None = None,
    type: str | None = None,
) -> ProductFilters:
    return ProductFilters(
        query=q,
        category_id=category_id,
        category_slug=category_slug,
        price_min=price_min,
        price_max=price_max,
        min_slices=min_slices,
        max_slices=max_slices,
        in_stock=in_stock,
        tags=tags or [],
        allergen_free=allergen_free or [],
        flavor=flavor,
        size=size,
        type=type,
    )


@product_router.get("")
async def search(
    q: str | None = None,
    category_id: str | None = None,
    category_slug: str | None = None,
    price_min: float | None = None,
    price_max: float | None = None,
    min_slices: int | None = None,
    max_slices: int | None = None,
    in_stock: bool | None = None,
    tags: list[str] | None = Query(None),
    allergen_free: list[str] | None = Query(None),
    flavor: str | None = None,
    size: str | None = None,
    type: str | None = None,
    sort: str = "created_at",
    direction: str = "desc",
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> dict:
    filters = _filters(
        q=q,
        category_id=category_id,
        category_slug=category_slug,
        price_min=price_min,
        price_max=price_max,
        min_slices=min_slices,
        max_slices=max_slices,
        in_stock=in_stock,
        tags=tags,
        allergen_free=allergen_free,
        flavor=flavor,
        size=size,
        type=type,
    )
    return search_products(filters, sort=sort, direction=direction, limit=limit, offset=offset)


@product_router.get("/count", response_model=CountResponse)
async def count_products(
    q: str | None = None,
    category_id: str | None = None,
    price_min: float | None = None,
    price_max: float | None = None,
    tags: list[str] | None = Query(None),
    allergen_free: list[str] | None = Query(None),
) -> CountResponse:
    filters = _filters(
        q=q,
        category_id=category_id,
        price_min=price_min,
        price_max=price_max,
        tags=tags,
        allergen_free=allergen_free,
    )
    return CountResponse(count=product_count(filters))


@product_router.get("/facets")
async def get_facets(category_id: str | None = None) -> dict:
    return filter_facets(category_id)


@product_router.get("/facets/popular-tags")
async def get_popular_tags(limit: int = Query(10, ge=1, le=50)) -> list[dict]:
    return popular_tags(limit)


@product_router.get("/facets/dietary-tags")
async def get_dietary_tags() -> list[dict]:
    return dietary_tags()


@product_router.get("/facets/occasion-tags")
async def get_occasion_tags() -> list[dict]:
    return occasion_tags()


@product_router.get("/facets/suggestions")
async def get_filter_suggestions(
    category_id: str | None = None,
    tags: list[str] | None = Query(None),
) -> dict:
    return filter_suggestions(category_id=category_id, tag_ids=tags or [])


@product_router.get("/featured")
async def get_featured(limit: int = Query(8, ge=1, le=50)) -> list[dict]:
    return featured_products(limit)


@product_router.get("/dietary")
async def get_by_dietary_needs(
    tags: list[str] | None = Query(None),
    allergen_free: list[str] | None = Query(None),
) -> list[dict]:
    return products_by_dietary_needs(tag_names=tags or [], allergen_free=allergen_free or [])


@product_router.get("/admin")
async def get_admin_products(
    search: str | None = None,
    category_id: str | None = None,
    is_active: bool | None = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
) -> dict:
    return admin_products(search, category_id, is_active, sort_by, sort_order, limit, offset)


@product_router.get("/stats")
async def get_product_stats() -> dict:
    return product_stats()


@product_router.get("/slug/{slug}")
async def get_product_by_slug(slug: str) -> dict:
    product = product_by_slug(slug)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@product_router.get("/{product_id}")
async def get_product(product_id: str) -> dict:
    product = product_by_id(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@product_router.get("/{product_id}/recommended")
async def get_recommended(product_id: str, limit: int = Query(4, ge=1, le=20)) -> list[dict]:
    return recommended_products(product_id, limit)


# --- Product write endpoints ---


@product_router.post("", status_code=201, response_model=IdResponse)
async def create_product(body: CreateProductRequest) -> IdResponse:
    result = _process(CreateProduct(**body.model_dump()))
    return IdResponse(id=result)


@product_router.post("/bulk", response_model=CountResponse)
async def bulk_update_products(body: BulkUpdateRequest) -> CountResponse:
    command = BulkUpdateProducts(
        product_ids=json.dumps(body.product_ids),
        operation=body.operation,
        data=json.dumps(body.data),
    )
    return CountResponse(count=_process(command))


@product_router.put("/{product_id}", response_model=StatusResponse)
async def update_product(product_id: str, body: UpdateProductRequest) -> StatusResponse:
    _process(UpdateProduct(product_id=product_id, **body.model_dump()))
    return StatusResponse()


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def delete_product(product_id: str) -> StatusResponse:
    _process(DeleteProduct(product_id=product_id))
    return StatusResponse(status="deleted")


@product_router.post("/{product_id}/stock")
async def adjust_stock(product_id: str, body: AdjustStockRequest) -> dict:
    new_quantity = _process(AdjustStock(product_id=product_id, quantity_change=body.quantity_change))
    return {"stock_quantity": new_quantity}


@product_router.post("/{product_id}/variants", status_code=201, response_model=IdResponse)
async def add_variant(product_id: str, body: VariantRequest) -> IdResponse:
    payload = body.model_dump()
    payload["attributes"] = json.dumps(body.attributes) if body.attributes is not None else None
    return IdResponse(id=_process(AddVariant(product_id=product_id, **payload)))


@product_router.put("/{product_id}/variants/{variant_id}", response_model=StatusResponse)
async def update_variant(product_id: str, variant_id: str, body: UpdateVariantRequest) -> StatusResponse:
    payload = body.model_dump()
    payload["attributes"] = json.dumps(body.attributes) if body.attributes is not None else None
    _process(UpdateVariant(product_id=product_id, variant_id=variant_id, **payload))
    return StatusResponse()


@product_router.delete("/{product_id}/variants/{variant_id}", response_model=StatusResponse)
async def remove_variant(product_id: str, variant_id: str) -> StatusResponse:
    _process(RemoveVariant(product_id=product_id, variant_id=variant_id))
    return StatusResponse(status="deleted")


@product_router.post("/{product_id}/images", status_code=201, response_model=IdResponse)
async def add_image(product_id: str, body: ImageRequest) -> IdResponse:
    return IdResponse(id=_process(AddProductImage(product_id=product_id, **body.model_dump())))


@product_router.put("/{product_id}/images/{image_id}/main", response_model=StatusResponse)
async def set_main_image(product_id: str, image_id: str) -> StatusResponse:
    _process(SetMainImage(product_id=product_id, image_id=image_id))
    return StatusResponse()


@product_router.delete("/{product_id}/images/{image_id}", response_model=StatusResponse)
async def remove_image(product_id: str, image_id: str) -> StatusResponse:
    _process(RemoveProductImage(product_id=product_id, image_id=image_id))
    return StatusResponse(status="deleted")


@product_router.post("/{product_id}/tags", status_code=201, response_model=StatusResponse)
async def tag_product(product_id: str, body: TagLinkRequest) -> StatusResponse:
    _process(TagProduct(product_id=product_id, tag_id=body.tag_id))
    return StatusResponse()


@product_router.delete("/{product_id}/tags/{tag_id}", response_model=StatusResponse)
async def untag_product(product_id: str, tag_id: str) -> StatusResponse:
    _process(UntagProduct(product_id=product_id, tag_id=tag_id))
    return StatusResponse(status="deleted")


@product_router.put("/{product_id}/allergens/{allergen_id}", response_model=StatusResponse)
async def declare_allergen(product_id: str, allergen_id: str, body: AllergenDeclarationRequest) -> StatusResponse:
    _process(DeclareAllergen(product_id=product_id, allergen_id=allergen_id, **body.model_dump()))
    return StatusResponse()


@product_router.delete("/{product_id}/allergens/{allergen_id}", response_model=StatusResponse)
async def remove_allergen(product_id: str, allergen_id: str) -> StatusResponse:
    _process(RemoveAllergen(product_id=product_id, allergen_id=allergen_id))
    return StatusResponse(status="deleted")


# --- Tag and allergen endpoints ---


@tag_router.get("")
async def get_tags(type: str | None = None) -> list[dict]:
    return list_tags(type)


@tag_router.post("", status_code=201, response_model=IdResponse)
async def create_tag(body: TagRequest) -> IdResponse:
    return IdResponse(id=_process(CreateTag(**body.model_dump())))


@tag_router.put("/{tag_id}", response_model=StatusResponse)
async def update_tag(tag_id: str, body: UpdateTagRequest) -> StatusResponse:
    _process(UpdateTag(tag_id=tag_id, **body.model_dump()))
    return StatusResponse()


@allergen_router.get("")
async def get_allergens() -> list[dict]:
    return list_allergens()


@allergen_router.post("", status_code=201, response_model=IdResponse)
async def create_allergen(body: AllergenRequest) -> IdResponse:
    return IdResponse(id=_process(CreateAllergen(**body.model_dump())))


@allergen_router.put("/{allergen_id}", response_model=StatusResponse)
async def update_allergen(allergen_id: str, body: UpdateAllergenRequest) -> StatusResponse:
    _process(UpdateAllergen(allergen_id=allergen_id, **body.model_dump()))
    return StatusResponse()

"""Product removal and bulk admin operations: commands and handler."""

import json
from enum import Enum

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.creation import ensure_category_exists
from catalogue.product.product import Product

logger = structlog.get_logger(__name__)


class BulkOperation(Enum):
    ACTIVATE = "activate"
    DEACTIVATE = "deactivate"
    DELETE = "delete"
    UPDATE_CATEGORY = "update-category"
    UPDATE_PRICE = "update-price"


@catalogue.command(part_of="Product")
class DeleteProduct:
    product_id: Identifier(required=True)


@catalogue.command(part_of="Product")
class BulkUpdateProducts:
    product_ids: Text(required=True, sanitize=False)  # JSON list of product ids
    operation: String(required=True, choices=BulkOperation)
    data: Text(sanitize=False)  # JSON object, e.g. {"category_id": ...} or {"base_price": ...}


def _delete(repo, product):
    product.mark_deleted()
    repo.add(product)
    repo._dao.delete(product)


def _parse_ids(raw):
    try:
        ids = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        raise ValidationError({"product_ids": ["Product ids must be a JSON list"]}) from None
    if not isinstance(ids, list) or not ids:
        raise ValidationError({"product_ids": ["At least one product ID is required"]})
    return list(dict.fromkeys(str(product_id) for product_id in ids))


def _parse_data(raw):
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        raise ValidationError({"data": ["Data must be valid JSON"]}) from None
    if not isinstance(data, dict):
        raise ValidationError({"data": ["Data must be an object"]})
    return data


@catalogue.command_handler(part_of=Product)
class ProductLifecycleHandler:
    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        _delete(repo, product)
        logger.info("Product deleted", product_id=str(command.product_id))

    @handle(BulkUpdateProducts)
    def bulk_update(self, command):
        product_ids = _parse_ids(command.product_ids)
        data = _parse_data(command.data)
        operation = command.operation

        if operation == BulkOperation.UPDATE_CATEGORY.value:
            if not data.get("category_id"):
                raise ValidationError({"category_id": ["Category ID is required for update-category"]})
            ensure_category_exists(data["category_id"])
        if operation == BulkOperation.UPDATE_PRICE.value and data.get("base_price") is None:
            raise ValidationError({"base_price": ["Base price is required for update-price"]})

        repo = current_domain.repository_for(Product)
        products = [repo.get(product_id) for product_id in product_ids]

        for product in products:
            if operation == BulkOperation.DELETE.value:
                _delete(repo, product)
                continue

            if operation == BulkOperation.ACTIVATE.value:
                product.update_details(is_active=True)
            elif operation == BulkOperation.DEACTIVATE.value:
                product.update_details(is_active=False)
            elif operation == BulkOperation.UPDATE_CATEGORY.value:
                product.update_details(category_id=data["category_id"])
            elif operation == BulkOperation.UPDATE_PRICE.value:
                product.update_details(base_price=data["base_price"])
            repo.add(product)

        logger.info("Bulk product update", operation=operation, count=len(products))
        return len(products)

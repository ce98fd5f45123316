# catalog_service/products.py

"""
Product endpoints: list, get, create, update and delete.

Input arrives already validated and normalized through `RequestValidator`;
the handlers only orchestrate repository calls and turn their outcome into
the response contract (200/201/204, 404 for a missing id, 500 for anything
else).
"""
import logging
from typing import Any, Dict, List, Optional, Type

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from .db import get_db
from .errors import ERROR_RESPONSES, internal_error, not_found
from .repository import ProductRepository
from .schemas import (
    CREATE_PRODUCT,
    PRODUCT_ID,
    UPDATE_PRODUCT,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
)
from .validation import ValidatedRequest, validate_body, validate_params, validate_update

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Products"])


def get_repository(db: Session = Depends(get_db)) -> ProductRepository:
    return ProductRepository(db)


def _openapi(body: Optional[Type[BaseModel]] = None, with_id: bool = False) -> Dict[str, Any]:
    """
    Documents the inputs that `RequestValidator` reads straight from the request,
    since FastAPI cannot see them in the handler signatures.
    """
    extra: Dict[str, Any] = {}
    if with_id:
        extra["parameters"] = [
            {
                "name": "id",
                "in": "path",
                "required": True,
                "description": "Product ID (positive integer).",
                "schema": {"type": "string", "pattern": r"^[0-9]+$"},
            }
        ]
    if body is not None:
        extra["requestBody"] = {
            "required": True,
            "content": {"application/json": {"schema": body.model_json_schema()}},
        }
    return extra


def _responses(*codes: int) -> Dict[Any, Dict[str, Any]]:
    return {code: ERROR_RESPONSES[code] for code in codes}


@router.get(
    "/products",
    response_model=List[ProductResponse],
    responses=_responses(status.HTTP_500_INTERNAL_SERVER_ERROR),
    summary="List all products, newest first",
)
def list_products(repository: ProductRepository = Depends(get_repository)):
    """
    Retrieves every product, ordered by creation date (newest first).
    """
    logger.info("Listing products")
    try:
        products = repository.find_all()
    except Exception as e:
        logger.error(f"Error listing products: {e}", exc_info=True)
        return internal_error("Não foi possível buscar os produtos")
    logger.info(f"Retrieved {len(products)} products.")
    return products


@router.get(
    "/products/{id}",
    response_model=ProductResponse,
    responses=_responses(
        status.HTTP_400_BAD_REQUEST,
        status.HTTP_404_NOT_FOUND,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    ),
    summary="Retrieve a product by ID",
    openapi_extra=_openapi(with_id=True),
)
def get_product(
    validated: ValidatedRequest = Depends(validate_params(PRODUCT_ID)),
    repository: ProductRepository = Depends(get_repository),
):
    """
    Retrieves a single product by its ID.

    - Returns 404 if the product does not exist.
    """
    product_id = validated.params
    logger.info(f"Fetching product with ID: {product_id}")
    try:
        product = repository.find_by_id(product_id)
    except Exception as e:
        logger.error(f"Error fetching product {product_id}: {e}", exc_info=True)
        return internal_error("Não foi possível buscar o produto")
    if product is None:
        logger.warning(f"Product with ID: {product_id} not found.")
        return not_found(product_id)
    return product


@router.post(
    "/products",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_responses(status.HTTP_400_BAD_REQUEST, status.HTTP_500_INTERNAL_SERVER_ERROR),
    summary="Create a new product",
    openapi_extra=_openapi(body=ProductCreate),
)
def create_product(
    validated: ValidatedRequest = Depends(validate_body(CREATE_PRODUCT)),
    repository: ProductRepository = Depends(get_repository),
):
    """
    Creates a new product.

    - `title`, `description` and `price` are required; unknown fields are rejected.
    - Returns the stored product including its generated `id` and timestamps.
    """
    data = validated.body
    logger.info(f"Creating product: {data.title}")
    try:
        product = repository.create(data)
    except Exception as e:
        logger.error(f"Error creating product: {e}", exc_info=True)
        return internal_error("Não foi possível criar o produto")
    logger.info(f"Product '{product.title}' (ID: {product.id}) created successfully.")
    return product


@router.put(
    "/products/{id}",
    response_model=ProductResponse,
    responses=_responses(
        status.HTTP_400_BAD_REQUEST,
        status.HTTP_404_NOT_FOUND,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    ),
    summary="Update an existing product",
    openapi_extra=_openapi(body=ProductUpdate, with_id=True),
)
def update_product(
    validated: ValidatedRequest = Depends(validate_update(PRODUCT_ID, UPDATE_PRODUCT)),
    repository: ProductRepository = Depends(get_repository),
):
    """
    Updates only the fields present in the body; at least one is required.

    - Returns 404 if the product does not exist.
    """
    product_id = validated.params
    patch = validated.body
    logger.info(f"Updating product with ID: {product_id} with data: {patch.changes()}")
    try:
        # Not atomic with the update below: a concurrent delete in between ends up as a 500.
        if repository.find_by_id(product_id) is None:
            logger.warning(f"Product with ID: {product_id} not found for update.")
            return not_found(product_id)
        product = repository.update(product_id, patch)
    except Exception as e:
        logger.error(f"Error updating product {product_id}: {e}", exc_info=True)
        return internal_error("Não foi possível atualizar o produto")
    logger.info(f"Product '{product.title}' (ID: {product_id}) updated successfully.")
    return product


@router.delete(
    "/products/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=_responses(
        status.HTTP_400_BAD_REQUEST,
        status.HTTP_404_NOT_FOUND,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    ),
    summary="Delete a product by ID",
    openapi_extra=_openapi(with_id=True),
)
def delete_product(
    validated: ValidatedRequest = Depends(validate_params(PRODUCT_ID)),
    repository: ProductRepository = Depends(get_repository),
):
    """
    Deletes a product permanently.

    - Returns 204 No Content on success, 404 if the product does not exist.
    """
    product_id = validated.params
    logger.info(f"Attempting to delete product with ID: {product_id}")
    try:
        if repository.find_by_id(product_id) is None:
            logger.warning(f"Product with ID: {product_id} not found for deletion.")
            return not_found(product_id)
        repository.delete(product_id)
    except Exception as e:
        logger.error(f"Error deleting product {product_id}: {e}", exc_info=True)
        return internal_error("Não foi possível deletar o produto")
    logger.info(f"Product (ID: {product_id}) deleted successfully.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

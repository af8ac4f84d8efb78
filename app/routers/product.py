# app/routers/product.py
from __future__ import annotations

from typing import Annotated, Any, List

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.orm import Session

from app.core.responses import DecimalJSONResponse
from app.database import get_db
from app.models.product import Product
from app.services import product as service
from app.schemas.product import ProductRead, ProductWrite

router = APIRouter(
    prefix="/api/products",
    tags=["Product Module"],
    default_response_class=DecimalJSONResponse,
)

_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"description": "Product not found"}}
_BAD_REQUEST = {status.HTTP_400_BAD_REQUEST: {"description": "Invalid product details provided"}}

# id-ul e BIGINT: valorile în afara intervalului pe 64 biți → 400, nu eroare de DB
ProductId = Annotated[int, Path(ge=-(2**63), le=2**63 - 1, description="Product id")]


def _dump(obj: Product) -> dict[str, Any]:
    # mode="python" păstrează Decimal; DecimalJSONResponse îl emite exact
    return ProductRead.model_validate(obj).model_dump(by_alias=True)


@router.get(
    "",
    response_model=List[ProductRead],
    summary="Retrieve all products",
    description="Fetches a list of all products entities.",
    response_description="Successfully retrieved list of products",
)
def list_products(db: Session = Depends(get_db)):
    return DecimalJSONResponse([_dump(p) for p in service.list_products(db)])


@router.get(
    "/{product_id}",
    response_model=ProductRead,
    summary="Retrieve a product by ID",
    description="Fetches the details of a specific product by its ID.",
    response_description="Found the Product",
    responses={**_NOT_FOUND, **_BAD_REQUEST},
)
def get_product(product_id: ProductId, db: Session = Depends(get_db)):
    # ProductNotFoundError → 404 cu body gol (handler în app/main.py)
    return DecimalJSONResponse(_dump(service.get_product(db, product_id)))


@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    description="Creates a new product with the provided details.",
    response_description="Product created successfully",
    responses=_BAD_REQUEST,
)
def create_product(payload: ProductWrite, db: Session = Depends(get_db)):
    obj = service.create_product(db, payload)
    return DecimalJSONResponse(_dump(obj), status_code=status.HTTP_201_CREATED)


@router.put(
    "/{product_id}",
    response_model=ProductRead,
    summary="Update an existing product",
    description="Updates an existing product with the provided details.",
    response_description="Product updated successfully",
    responses={**_NOT_FOUND, **_BAD_REQUEST},
)
def update_product(product_id: ProductId, payload: ProductWrite, db: Session = Depends(get_db)):
    return DecimalJSONResponse(_dump(service.update_product(db, product_id, payload)))


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a product",
    description="Deletes a product by its ID.",
    response_description="Product deleted successfully",
    responses={**_NOT_FOUND, **_BAD_REQUEST},
)
def delete_product(product_id: ProductId, db: Session = Depends(get_db)):
    service.delete_product(db, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

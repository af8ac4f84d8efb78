# app/services/product.py
from __future__ import annotations

import logging
from typing import List

from sqlalchemy.orm import Session

from app.crud import product as crud
from app.crud.product import ProductNotFoundError
from app.models.product import Product
from app.schemas.product import ProductWrite

logger = logging.getLogger(__name__)

# câmpurile suprascrise la update; image_url și price rămân cum erau
MERGED_FIELDS = ("name", "description")


def list_products(db: Session) -> List[Product]:
    items = crud.find_all(db)
    logger.debug("Listed %d products", len(items))
    return items


def get_product(db: Session, product_id: int) -> Product:
    obj = crud.find_by_id(db, product_id)
    if obj is None:
        raise ProductNotFoundError(product_id)
    return obj


def create_product(db: Session, payload: ProductWrite) -> Product:
    """Creează produsul; un `id` venit din payload nu ajunge niciodată în storage."""
    obj = Product(
        name=payload.name,
        description=payload.description,
        image_url=payload.image_url,
        price=payload.price,
    )
    obj = crud.save(db, obj)
    logger.info("Created product id=%s", obj.id)
    return obj


def update_product(db: Session, product_id: int, payload: ProductWrite) -> Product:
    """
    Merge-then-save: încarcă produsul existent, suprascrie doar `name` și
    `description` din payload (inclusiv cu None) și salvează.
    `id`, `image_url` și `price` din payload sunt ignorate.
    """
    obj = get_product(db, product_id)
    for field in MERGED_FIELDS:
        setattr(obj, field, getattr(payload, field))
    obj = crud.save(db, obj)
    logger.info("Updated product id=%s", obj.id)
    return obj


def delete_product(db: Session, product_id: int) -> None:
    # pre-check explicit: delete_by_id nu e garantat no-op pe id lipsă
    get_product(db, product_id)
    crud.delete_by_id(db, product_id)
    logger.info("Deleted product id=%s", product_id)

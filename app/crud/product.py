# app/crud/product.py
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.product import Product


class ProductNotFoundError(LookupError):
    """Ridicată când un produs cu id-ul dat nu există în storage."""

    def __init__(self, product_id: int):
        super().__init__(f"Product {product_id} not found.")
        self.product_id = product_id


def find_all(db: Session) -> List[Product]:
    """Toate produsele, în ordinea naturală a storage-ului (PK)."""
    stmt = select(Product).order_by(Product.id.asc())
    return list(db.execute(stmt).scalars().all())


def find_by_id(db: Session, product_id: int) -> Optional[Product]:
    """Returnează produsul după ID (sau None)."""
    return db.get(Product, product_id)


def save(db: Session, obj: Product) -> Product:
    """
    Upsert după identitate:
      - id lipsă sau necunoscut → INSERT cu id generat de DB;
      - id existent → UPDATE pe rândul respectiv.
    Returnează instanța persistată (cu id populat).
    """
    if obj.id is not None and obj not in db:
        if db.get(Product, obj.id) is None:
            # id necunoscut: identitatea e a storage-ului, nu a apelantului
            obj.id = None
        else:
            obj = db.merge(obj)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def delete_by_id(db: Session, product_id: int) -> None:
    """Șterge produsul după ID; ridică ProductNotFoundError dacă lipsește."""
    obj = db.get(Product, product_id)
    if obj is None:
        raise ProductNotFoundError(product_id)
    db.delete(obj)
    db.commit()

# catalog_service/repository.py

"""
Persistence for products.

`ProductRepository` wraps one SQLAlchemy session. Every mutating call commits
on success and rolls back before re-raising on failure. A missing row is
reported as `None` by `find_by_id` and as `ProductNotFound` by `update` and
`delete`.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from .models import Product, utcnow
from .schemas import NewProduct, ProductPatch

logger = logging.getLogger(__name__)


class ProductNotFound(Exception):
    def __init__(self, product_id: int):
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class ProductRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_all(self) -> List[Product]:
        # Newest first; ids break ties between rows created in the same instant
        return (
            self.db.query(Product)
            .order_by(Product.created_at.desc(), Product.id.desc())
            .all()
        )

    def find_by_id(self, product_id: int) -> Optional[Product]:
        return self.db.query(Product).filter(Product.id == product_id).first()

    def create(self, data: NewProduct) -> Product:
        product = Product(title=data.title, description=data.description, price=data.price)
        try:
            self.db.add(product)
            self.db.commit()
            self.db.refresh(product)
        except Exception:
            self.db.rollback()
            raise
        logger.debug(f"Inserted {product!r}")
        return product

    def _loaded(self, product_id: int) -> Optional[Product]:
        # Served from the identity map when the row was already loaded in this session
        return self.db.get(Product, product_id)

    def update(self, product_id: int, patch: ProductPatch) -> Product:
        product = self._loaded(product_id)
        if product is None:
            raise ProductNotFound(product_id)

        for field, value in patch.changes().items():
            setattr(product, field, value)
        # Set explicitly: onupdate does not fire when the new values equal the old ones
        product.updated_at = utcnow()
        try:
            self.db.add(product)
            self.db.commit()
            self.db.refresh(product)
        except Exception:
            self.db.rollback()
            raise
        return product

    def delete(self, product_id: int) -> None:
        product = self._loaded(product_id)
        if product is None:
            raise ProductNotFound(product_id)
        try:
            self.db.delete(product)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def delete_all(self) -> int:
        try:
            count = self.db.query(Product).delete()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return count

# catalog_service/models.py

"""
SQLAlchemy database models for the catalog service.
These classes define the structure of tables in the database.
"""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, Numeric, String, Text

from .db import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(Base):
    """
    SQLAlchemy model for the 'products' table.
    Represents a catalog product with its title, description and price.
    """

    __tablename__ = "products"
    # SQLite would otherwise hand out the ids of deleted rows again
    __table_args__ = {"sqlite_autoincrement": True}

    # Primary Key: auto-incrementing, never reused.
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Product title: Required, max 255 chars, indexed for faster lookups.
    title = Column(String(255), nullable=False, index=True)

    description = Column(Text, nullable=False)

    # Product price: Required, numeric with 10 total digits and 2 decimal places.
    price = Column(Numeric(10, 2), nullable=False)

    # Timestamps are assigned here, never by clients.
    # 'updated_at' also moves forward on every record update.
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    def __repr__(self):
        return f"<Product(id={self.id}, title='{self.title}', price={self.price})>"

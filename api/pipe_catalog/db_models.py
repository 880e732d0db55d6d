# pipe_catalog/db_models.py
"""
SQLAlchemy ORM Models for the Pipe Catalog.

Three item tables (pipes, tobaccos, accessories) plus the ratings and images
side tables keyed by (item_id, item_type).
"""
from __future__ import annotations
from datetime import datetime
from typing import Optional
import enum
import uuid

from sqlalchemy import (
    String, Integer, Boolean, Text, DateTime,
    Index, CheckConstraint, Enum as SQLEnum, func
)
from sqlalchemy.orm import Mapped, mapped_column

from pipe_catalog.database import Base

# ============================================================================
# ENUMS
# ============================================================================

class ItemType(str, enum.Enum):
    pipe = "pipe"
    tobacco = "tobacco"
    accessory = "accessory"


ITEM_TYPE_ENUM = SQLEnum(ItemType, name="item_type")


def _new_id() -> str:
    return uuid.uuid4().hex


# ============================================================================
# MIXIN for updated_at
# ============================================================================

class TimestampMixin:
    """Mixin for created_at and updated_at columns."""
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=func.now(),
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=func.now(),
        onupdate=func.now(),
        nullable=False
    )


# ============================================================================
# 1. PIPES
# ============================================================================

class Pipe(TimestampMixin, Base):
    __tablename__ = "pipes"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    brand: Mapped[str] = mapped_column(String(255), nullable=False)
    material: Mapped[Optional[str]] = mapped_column(String(100))
    shape: Mapped[Optional[str]] = mapped_column(String(100))
    finish: Mapped[Optional[str]] = mapped_column(String(100))
    filter_type: Mapped[Optional[str]] = mapped_column(String(100))
    stem_material: Mapped[Optional[str]] = mapped_column(String(100))
    country: Mapped[Optional[str]] = mapped_column(String(100))
    observations: Mapped[Optional[str]] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        Index("idx_pipes_brand", "brand"),
        Index("idx_pipes_active", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<Pipe {self.brand} {self.name}>"


# ============================================================================
# 2. TOBACCOS
# ============================================================================

class Tobacco(TimestampMixin, Base):
    __tablename__ = "tobaccos"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    brand: Mapped[str] = mapped_column(String(255), nullable=False)
    blend_type: Mapped[Optional[str]] = mapped_column(String(100))
    contents: Mapped[Optional[str]] = mapped_column(Text)
    cut: Mapped[Optional[str]] = mapped_column(String(100))
    strength: Mapped[Optional[int]] = mapped_column(Integer)
    room_note: Mapped[Optional[int]] = mapped_column(Integer)
    taste: Mapped[Optional[int]] = mapped_column(Integer)
    observations: Mapped[Optional[str]] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        Index("idx_tobaccos_brand", "brand"),
        Index("idx_tobaccos_active", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<Tobacco {self.brand} {self.name}>"


# ============================================================================
# 3. ACCESSORIES
# ============================================================================

class Accessory(TimestampMixin, Base):
    __tablename__ = "accessories"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    brand: Mapped[Optional[str]] = mapped_column(String(255))
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    observations: Mapped[Optional[str]] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        Index("idx_accessories_category", "category"),
        Index("idx_accessories_active", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<Accessory {self.category} {self.name}>"


# ============================================================================
# 4. RATINGS
# ============================================================================

class Rating(Base):
    __tablename__ = "ratings"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    item_id: Mapped[str] = mapped_column(String(32), nullable=False)
    item_type: Mapped[ItemType] = mapped_column(ITEM_TYPE_ENUM, nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    session_id: Mapped[Optional[str]] = mapped_column(String(100))
    ip_address: Mapped[Optional[str]] = mapped_column(String(64))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=func.now(), nullable=False
    )

    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="chk_rating_range"),
        Index("idx_ratings_item", "item_id", "item_type"),
    )


# ============================================================================
# 5. IMAGES
# ============================================================================

class Image(Base):
    __tablename__ = "images"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    item_id: Mapped[str] = mapped_column(String(32), nullable=False)
    item_type: Mapped[ItemType] = mapped_column(ITEM_TYPE_ENUM, nullable=False)
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=func.now(), nullable=False
    )

    __table_args__ = (
        Index("idx_images_item", "item_id", "item_type"),
    )

"""SQLAlchemy ORM models for Recepti.

Tables:
- recipes: Recipe records keyed by a unique slug, with ingredients/steps/images
  stored as JSON documents
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import String, DateTime, Text, Integer, Enum, Index
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import JSON

from .db import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# JSONB on Postgres, plain JSON everywhere else (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class Difficulty(str, enum.Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class DishGroup(str, enum.Enum):
    MAIN = "MAIN"
    DESSERT = "DESSERT"
    BREAD = "BREAD"
    APPETIZER = "APPETIZER"
    SALAD = "SALAD"
    SOUP = "SOUP"


class CookingMethod(str, enum.Enum):
    BAKE = "BAKE"
    FRY = "FRY"
    BOIL = "BOIL"
    GRILL = "GRILL"
    NO_COOK = "NO_COOK"


class Recipe(Base):
    """A catalog recipe.

    `image_cdn_path` is the canonical hero path; `images` carries the richer
    structure (hero/gallery/variants) and its hero mirrors `image_cdn_path`.
    """
    __tablename__ = "recipes"
    __table_args__ = (
        Index("ix_recipes_created_at", "created_at"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    slug: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    lead: Mapped[str] = mapped_column(Text, nullable=False)
    prep_time_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    servings: Mapped[int] = mapped_column(Integer, nullable=False)

    difficulty: Mapped[Difficulty] = mapped_column(
        Enum(Difficulty, name="difficulty"), nullable=False
    )
    dish_group: Mapped[DishGroup] = mapped_column(
        Enum(DishGroup, name="dish_group"), nullable=False
    )
    cooking_method: Mapped[CookingMethod] = mapped_column(
        Enum(CookingMethod, name="cooking_method"), nullable=False
    )

    tags: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    ingredients: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    steps: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)

    image_cdn_path: Mapped[str] = mapped_column(String(500), nullable=False)
    images: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Recipe {self.slug}>"

"""Pydantic schemas for Recepti API.

Request/response models for:
- Recipes (create payload, partial update payload, list/detail output)
- Recipe images (hero/gallery/variants structure)
- Uploads

JSON field names are camelCase; Python attributes stay snake_case.
"""

from datetime import datetime
from typing import Annotated, Any, Generic, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .models import CookingMethod, Difficulty, DishGroup

T = TypeVar("T")

NonEmptyStr = Annotated[str, Field(min_length=1)]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class DataEnvelope(BaseModel, Generic[T]):
    data: T


# --- Images ---

class ImageRef(CamelModel):
    model_config = ConfigDict(extra="allow")

    cdn_path: NonEmptyStr
    alt: Optional[NonEmptyStr] = None


class RecipeImages(CamelModel):
    """Tagged image structure; unknown keys are carried through untouched."""
    model_config = ConfigDict(extra="allow")

    hero: Optional[ImageRef] = None
    gallery: Optional[list[ImageRef]] = None
    variants: Optional[dict[str, ImageRef]] = None


# --- Content ---

class Ingredient(CamelModel):
    name: NonEmptyStr
    amount: Optional[Union[int, float, str]] = None
    unit: Optional[NonEmptyStr] = None


class Step(CamelModel):
    text: NonEmptyStr


# --- Recipe payloads ---

class RecipeBase(CamelModel):
    title: str = Field(..., min_length=3, max_length=200)
    lead: str = Field(..., min_length=10)
    prep_time_minutes: int = Field(..., gt=0, le=24 * 60)
    servings: int = Field(..., gt=0, le=100)
    difficulty: Difficulty
    dish_group: DishGroup
    cooking_method: CookingMethod
    tags: list[NonEmptyStr] = Field(default_factory=list)
    ingredients: list[Ingredient] = Field(..., min_length=1)
    steps: list[Step] = Field(..., min_length=1)
    image_cdn_path: str = Field(..., min_length=1, max_length=500)
    images: Optional[RecipeImages] = None


class RecipeCreate(RecipeBase):
    slug: Optional[str] = Field(None, min_length=1, max_length=200)


class RecipeUpdate(CamelModel):
    """Partial update. Omitted fields are left alone; explicit nulls are rejected."""

    title: Optional[str] = Field(None, min_length=3, max_length=200)
    lead: Optional[str] = Field(None, min_length=10)
    prep_time_minutes: Optional[int] = Field(None, gt=0, le=24 * 60)
    servings: Optional[int] = Field(None, gt=0, le=100)
    difficulty: Optional[Difficulty] = None
    dish_group: Optional[DishGroup] = None
    cooking_method: Optional[CookingMethod] = None
    tags: Optional[list[NonEmptyStr]] = None
    ingredients: Optional[list[Ingredient]] = Field(None, min_length=1)
    steps: Optional[list[Step]] = Field(None, min_length=1)
    image_cdn_path: Optional[str] = Field(None, min_length=1, max_length=500)
    images: Optional[RecipeImages] = None

    @model_validator(mode="after")
    def reject_explicit_nulls(self):
        nulls = sorted(name for name in self.model_fields_set if getattr(self, name) is None)
        if nulls:
            raise ValueError(f"Fields may not be null: {', '.join(nulls)}")
        return self


# --- Recipe output ---

class RecipeListItemOut(CamelModel):
    id: str
    slug: str
    title: str
    lead: str
    prep_time_minutes: int
    difficulty: Difficulty
    dish_group: DishGroup
    cooking_method: CookingMethod
    image_cdn_path: str
    images: Optional[RecipeImages] = None


class RecipeOut(RecipeListItemOut):
    servings: int
    tags: list[str]
    ingredients: list[Ingredient]
    steps: list[Step]
    created_at: datetime
    updated_at: datetime


# --- Uploads ---

class UploadOut(CamelModel):
    cdn_path: str


# --- Dev ---

class SeedOut(BaseModel):
    recipes_created: int
    message: str


def dump_json(model: BaseModel) -> Any:
    """Dump a payload model to the JSON document stored in the database."""
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)

"""Recipe persistence: CRUD by slug with slug allocation and image-path consistency.

Every recipe leaving the repository has its image paths normalized against
the local CDN (see `CdnPathNormalizer`), and `images.hero.cdnPath` agrees
with `image_cdn_path`.
"""

import logging
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.images import with_hero_cdn_path
from ..core.slug import make_slug, slug_candidate
from ..models import CookingMethod, Difficulty, DishGroup, Recipe
from ..schemas import (
    RecipeCreate,
    RecipeListItemOut,
    RecipeOut,
    RecipeUpdate,
    dump_json,
)
from .cdn_paths import CdnPathNormalizer

logger = logging.getLogger("recepti.recipes")


class SlugGenerationFailed(Exception):
    """Neither the explicit slug nor the title produced a usable slug."""


class SlugConflict(Exception):
    """The storage layer kept rejecting slug candidates as duplicates."""

    def __init__(self, base_slug: str):
        super().__init__(f"Could not allocate a unique slug for '{base_slug}'")
        self.base_slug = base_slug


class RecipeNotFound(Exception):
    def __init__(self, slug: str):
        super().__init__(f"Recipe '{slug}' not found")
        self.slug = slug


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the driver reports a unique constraint violation."""
    orig = getattr(exc, "orig", None)
    if getattr(orig, "pgcode", None) == "23505":
        return True
    return "unique" in str(orig or exc).lower()


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class RecipeRepository:
    def __init__(self, db: Session, cdn_paths: CdnPathNormalizer, max_slug_attempts: int = 5):
        self.db = db
        self.cdn_paths = cdn_paths
        self.max_slug_attempts = max(1, max_slug_attempts)

    # --- Reads ---

    def list_recipes(
        self,
        q: Optional[str] = None,
        difficulty: Optional[Difficulty] = None,
        dish_group: Optional[DishGroup] = None,
        cooking_method: Optional[CookingMethod] = None,
    ) -> list[RecipeListItemOut]:
        """All recipes, newest first. Filters are optional and combine with AND."""
        query = self.db.query(Recipe)

        if q and q.strip():
            pattern = f"%{_escape_like(q.strip())}%"
            query = query.filter(
                or_(Recipe.title.ilike(pattern, escape="\\"), Recipe.lead.ilike(pattern, escape="\\"))
            )
        if difficulty is not None:
            query = query.filter(Recipe.difficulty == difficulty)
        if dish_group is not None:
            query = query.filter(Recipe.dish_group == dish_group)
        if cooking_method is not None:
            query = query.filter(Recipe.cooking_method == cooking_method)

        recipes = query.order_by(Recipe.created_at.desc(), Recipe.id.desc()).all()
        return [self._to_list_out(r) for r in recipes]

    def get_by_slug(self, slug: str) -> Optional[RecipeOut]:
        recipe = self._find(slug)
        if recipe is None:
            return None
        return self._to_out(recipe)

    # --- Writes ---

    def create(self, payload: RecipeCreate) -> RecipeOut:
        base = make_slug(payload.slug) if payload.slug else make_slug(payload.title)
        if not base:
            raise SlugGenerationFailed()

        if payload.images is not None:
            images = dump_json(payload.images)
        else:
            images = {"hero": {"cdnPath": payload.image_cdn_path}}

        fields = {
            "title": payload.title,
            "lead": payload.lead,
            "prep_time_minutes": payload.prep_time_minutes,
            "servings": payload.servings,
            "difficulty": payload.difficulty,
            "dish_group": payload.dish_group,
            "cooking_method": payload.cooking_method,
            "tags": list(payload.tags),
            "ingredients": [dump_json(i) for i in payload.ingredients],
            "steps": [dump_json(s) for s in payload.steps],
            "image_cdn_path": payload.image_cdn_path,
            "images": images,
        }

        suffix = 1
        for _ in range(self.max_slug_attempts):
            slug, suffix = self._first_free_slug(base, suffix)
            recipe = Recipe(slug=slug, **fields)
            self.db.add(recipe)
            try:
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                if not is_unique_violation(e):
                    raise
                # Another writer took this slug between the probe and the insert
                logger.info(f"Slug '{slug}' taken concurrently, retrying with next suffix")
                suffix += 1
                continue

            self.db.refresh(recipe)
            logger.info(f"Created recipe {recipe.id} with slug '{recipe.slug}'")
            return self._to_out(recipe)

        raise SlugConflict(base)

    def update(self, slug: str, patch: RecipeUpdate) -> RecipeOut:
        """
        Apply a partial update.

        When `image_cdn_path` changes without `images` in the same patch, the
        stored images keep everything except `hero.cdnPath`, which follows the
        new path.
        """
        recipe = self._find(slug)
        if recipe is None:
            raise RecipeNotFound(slug)

        changes = patch.model_dump(exclude_unset=True)

        for name in ("title", "lead", "prep_time_minutes", "servings",
                     "difficulty", "dish_group", "cooking_method", "image_cdn_path"):
            if name in changes:
                setattr(recipe, name, getattr(patch, name))

        if "tags" in changes:
            recipe.tags = list(patch.tags)
        if "ingredients" in changes:
            recipe.ingredients = [dump_json(i) for i in patch.ingredients]
        if "steps" in changes:
            recipe.steps = [dump_json(s) for s in patch.steps]

        if "images" in changes:
            recipe.images = dump_json(patch.images)
        elif "image_cdn_path" in changes:
            recipe.images = with_hero_cdn_path(recipe.images, patch.image_cdn_path)

        self.db.commit()
        self.db.refresh(recipe)
        logger.info(f"Updated recipe '{slug}' fields: {', '.join(sorted(changes))}")
        return self._to_out(recipe)

    def delete(self, slug: str) -> RecipeOut:
        recipe = self._find(slug)
        if recipe is None:
            raise RecipeNotFound(slug)

        deleted = self._to_out(recipe)
        self.db.delete(recipe)
        self.db.commit()
        logger.info(f"Deleted recipe '{slug}'")
        return deleted

    # --- Helpers ---

    def _find(self, slug: str) -> Optional[Recipe]:
        return self.db.query(Recipe).filter(Recipe.slug == slug).first()

    def _slug_taken(self, slug: str) -> bool:
        return self.db.query(Recipe.id).filter(Recipe.slug == slug).first() is not None

    def _first_free_slug(self, base: str, start: int = 1) -> tuple[str, int]:
        suffix = start
        while self._slug_taken(slug_candidate(base, suffix)):
            suffix += 1
        return slug_candidate(base, suffix), suffix

    def _normalized_images(self, recipe: Recipe) -> tuple[str, dict]:
        images = self.cdn_paths.normalize_images(recipe.images, recipe.image_cdn_path)
        return images["hero"]["cdnPath"], images

    def _to_list_out(self, recipe: Recipe) -> RecipeListItemOut:
        image_cdn_path, images = self._normalized_images(recipe)
        return RecipeListItemOut(
            id=recipe.id,
            slug=recipe.slug,
            title=recipe.title,
            lead=recipe.lead,
            prep_time_minutes=recipe.prep_time_minutes,
            difficulty=recipe.difficulty,
            dish_group=recipe.dish_group,
            cooking_method=recipe.cooking_method,
            image_cdn_path=image_cdn_path,
            images=images,
        )

    def _to_out(self, recipe: Recipe) -> RecipeOut:
        image_cdn_path, images = self._normalized_images(recipe)
        return RecipeOut(
            id=recipe.id,
            slug=recipe.slug,
            title=recipe.title,
            lead=recipe.lead,
            prep_time_minutes=recipe.prep_time_minutes,
            servings=recipe.servings,
            difficulty=recipe.difficulty,
            dish_group=recipe.dish_group,
            cooking_method=recipe.cooking_method,
            tags=recipe.tags or [],
            ingredients=recipe.ingredients or [],
            steps=recipe.steps or [],
            image_cdn_path=image_cdn_path,
            images=images,
            created_at=recipe.created_at,
            updated_at=recipe.updated_at,
        )

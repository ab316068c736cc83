"""FastAPI dependencies for Recepti API.

Provides:
- Database session dependency (re-exported from db)
- Local CDN storage and the image path normalizer
- Recipe repository and asset server wired from the above
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from .db import get_db
from .services.asset_server import AssetServer
from .services.cdn_paths import CdnPathNormalizer, get_cdn_paths
from .services.recipe_repo import RecipeRepository
from .services.storage import LocalStorage, get_storage
from .settings import settings

__all__ = ["get_db", "get_storage", "get_cdn_paths", "get_repository", "get_asset_server"]


def get_repository(
    db: Session = Depends(get_db),
    cdn_paths: CdnPathNormalizer = Depends(get_cdn_paths),
) -> RecipeRepository:
    return RecipeRepository(db, cdn_paths, max_slug_attempts=settings.slug_max_attempts)


def get_asset_server(storage: LocalStorage = Depends(get_storage)) -> AssetServer:
    return AssetServer(storage)

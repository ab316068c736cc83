"""Self-healing of stored image paths.

Stored paths can drift from what is on disk (an image re-encoded to .webp, a
seed script writing .svg while the row says .png). On read, a missing path is
swapped for the first sibling with a known image extension that exists.
"""

import logging
import posixpath
from typing import Optional

from ..core.images import SIBLING_EXTENSIONS, hero_cdn_path, with_hero_cdn_path
from ..infra.path_cache import PathCache, build_path_cache
from .storage import LocalStorage, get_storage

logger = logging.getLogger("recepti.cdn_paths")


class CdnPathNormalizer:
    def __init__(self, storage: LocalStorage, cache: PathCache):
        self.storage = storage
        self.cache = cache

    def normalize(self, cdn_path: str) -> str:
        cached = self.cache.get(cdn_path)
        if cached:
            return cached

        normalized = self._probe(cdn_path)
        self.cache.set(cdn_path, normalized)
        return normalized

    def _probe(self, cdn_path: str) -> str:
        has_leading_slash = cdn_path.startswith("/")
        rel = cdn_path[1:] if has_leading_slash else cdn_path

        if self.storage.exists(rel):
            return cdn_path

        stem, ext = posixpath.splitext(rel)
        for candidate_ext in SIBLING_EXTENSIONS:
            if candidate_ext == ext.lower():
                continue
            candidate = f"{stem}{candidate_ext}"
            if self.storage.exists(candidate):
                normalized = ("/" if has_leading_slash else "") + candidate
                logger.debug(f"Image path {cdn_path} healed to {normalized}")
                return normalized

        return cdn_path

    def normalize_images(self, images: Optional[dict], fallback_cdn_path: str) -> dict:
        """
        Normalized copy of `images` with a hero always present.

        The hero path falls back to the record's `image_cdn_path` when the
        stored structure has none.
        """
        raw = hero_cdn_path(images) or fallback_cdn_path
        return with_hero_cdn_path(images, self.normalize(raw))


_normalizer: Optional[CdnPathNormalizer] = None


def get_cdn_paths() -> CdnPathNormalizer:
    global _normalizer
    if _normalizer is None:
        _normalizer = CdnPathNormalizer(get_storage(), build_path_cache())
    return _normalizer

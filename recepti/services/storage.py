import logging
import shutil
from pathlib import Path
from typing import Optional

from ..core.slug import is_valid_slug
from ..settings import settings

logger = logging.getLogger("recepti.storage")


class LocalStorage:
    """Local directory standing in for the CDN / object store.

    Keys are paths relative to the root, with or without a leading slash
    ("recipes/rizi-bizi/hero.webp"). Every key is resolved and checked to stay
    inside the root before it touches the filesystem.
    """

    def __init__(self, root: str | Path):
        self.root = Path(root).resolve()

    def resolve(self, key: str) -> Optional[Path]:
        """Absolute path for `key`, or None when it escapes the root."""
        rel = key.lstrip("/")
        try:
            resolved = (self.root / rel).resolve()
            resolved.relative_to(self.root)
        except (ValueError, OSError):
            return None
        return resolved

    def exists(self, key: str) -> bool:
        path = self.resolve(key)
        if path is None:
            return False
        try:
            return path.is_file()
        except OSError:
            return False

    def put_bytes(self, key: str, data: bytes) -> str:
        """
        Save bytes to local disk.
        Returns: CDN path ("/" + key)
        """
        file_path = self.resolve(key)
        if file_path is None:
            raise ValueError("Invalid storage key")

        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, "wb") as f:
            f.write(data)

        logger.info(f"Saved {len(data)} bytes to {file_path}")
        return "/" + key.lstrip("/")

    def delete_recipe_folder(self, slug: str) -> bool:
        """
        Best-effort removal of recipes/<slug>/.
        Returns True if removed or absent, False when skipped or on error.
        """
        if not is_valid_slug(slug):
            logger.warning(f"Refusing to delete folder for invalid slug {slug!r}")
            return False

        recipes_root = self.resolve("recipes")
        folder = self.resolve(f"recipes/{slug}")
        if recipes_root is None or folder is None or folder.parent != recipes_root:
            return False

        try:
            if folder.exists():
                shutil.rmtree(folder)
                logger.info(f"Deleted folder {folder}")
            return True
        except OSError as e:
            logger.warning(f"Failed to delete folder {folder}: {e}")
            return False


_storage: Optional[LocalStorage] = None


def get_storage() -> LocalStorage:
    global _storage
    if _storage is None:
        _storage = LocalStorage(settings.cdn_root)
    return _storage

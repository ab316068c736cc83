"""Image file helpers shared by uploads, path normalization and the CDN route."""

import re
from typing import Optional

SUPPORTED_IMAGE_MIME_TYPES = (
    "image/jpeg",
    "image/png",
    "image/webp",
    "image/svg+xml",
)

_EXT_BY_MIME = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/svg+xml": ".svg",
}

# Probe order used when a stored image extension is missing on disk
SIBLING_EXTENSIONS = (".webp", ".jpg", ".jpeg", ".png", ".svg")

# hero.2b1c4d7a.webp, hero-2b1c4d7a.webp, hero.2b1c4d7a9e10.webp
_FINGERPRINT_RE = re.compile(r"(?:\.|-)[a-f0-9]{8,}\.", re.IGNORECASE)


def normalize_image_ext(ext: str) -> Optional[str]:
    """Lowercase, ensure a leading dot, map .jpeg to .jpg. None if unsupported."""
    e = ext.lower() if ext.startswith(".") else f".{ext.lower()}"
    if e == ".jpeg":
        return ".jpg"
    if e in (".jpg", ".png", ".webp", ".svg"):
        return e
    return None


def image_ext_from_mime(mime: Optional[str]) -> Optional[str]:
    if not mime:
        return None
    return _EXT_BY_MIME.get(mime.split(";")[0].strip().lower())


def image_ext_from_name(file_name: Optional[str]) -> Optional[str]:
    if not file_name:
        return None
    m = re.search(r"\.([a-z0-9]+)$", file_name.strip(), re.IGNORECASE)
    if not m:
        return None
    return normalize_image_ext(m.group(1))


def image_ext_from_upload(content_type: Optional[str], file_name: Optional[str]) -> Optional[str]:
    """Prefer the MIME type, fall back to the filename extension."""
    return image_ext_from_mime(content_type) or image_ext_from_name(file_name)


def is_fingerprinted(file_name: str) -> bool:
    """Whether a filename embeds a content hash (safe for long-term caching)."""
    return bool(_FINGERPRINT_RE.search(file_name))


def with_hero_cdn_path(images: Optional[dict], cdn_path: str) -> dict:
    """
    Return a copy of `images` whose hero points at `cdn_path`.

    Every other key of `images` (gallery, variants, unknown extras) and of
    `hero` (alt, ...) is kept.
    """
    base = dict(images) if isinstance(images, dict) else {}
    hero = base.get("hero")
    hero = dict(hero) if isinstance(hero, dict) else {}
    hero["cdnPath"] = cdn_path
    base["hero"] = hero
    return base


def hero_cdn_path(images: Optional[dict]) -> Optional[str]:
    if not isinstance(images, dict):
        return None
    hero = images.get("hero")
    if isinstance(hero, dict) and isinstance(hero.get("cdnPath"), str):
        return hero["cdnPath"]
    return None

"""Slug generation and validation."""

import re

from slugify import slugify

# Lowercase alphanumerics separated by single dashes
SLUG_REGEX = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def is_valid_slug(slug: str) -> bool:
    return bool(SLUG_REGEX.match(slug or ""))


def make_slug(text: str) -> str:
    """
    Turn free-form text into a URL-safe slug.

    Diacritics are transliterated to ASCII ("Čokoladni muffini" -> "cokoladni-muffini"),
    everything outside [a-z0-9] collapses into single hyphens.
    Returns "" when nothing sluggable is left.
    """
    if not text:
        return ""
    return slugify(text, lowercase=True, separator="-", replacements=[["&", "and"]])


def slug_candidate(base: str, suffix: int) -> str:
    """base, base-2, base-3, ..."""
    return base if suffix <= 1 else f"{base}-{suffix}"

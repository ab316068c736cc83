"""Upload API router for recipe hero images.

Files are stored content-addressed (`recipes/<slug>/hero.<sha256[:12]><ext>`),
so the CDN route can serve them as immutable.
"""

import hashlib
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from slowapi import Limiter
from slowapi.util import get_remote_address

from ..core.images import image_ext_from_upload
from ..core.slug import is_valid_slug
from ..deps import get_storage
from ..errors import BadRequest, Messages, ValidationFailed
from ..schemas import DataEnvelope, UploadOut
from ..services.storage import LocalStorage
from ..settings import settings

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)
logger = logging.getLogger("recepti.uploads")

HASH_PREFIX_LEN = 12


@router.post("/uploads/recipe-hero", response_model=DataEnvelope[UploadOut], status_code=201)
@limiter.limit(settings.upload_rate_limit)
async def upload_recipe_hero(
    request: Request,
    slug: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    storage: LocalStorage = Depends(get_storage),
):
    """Store a hero image for a recipe and return its CDN path."""
    slug = (slug or "").strip()
    if not slug or not is_valid_slug(slug):
        raise ValidationFailed(Messages.INVALID_SLUG)

    if file is None:
        raise ValidationFailed(Messages.MISSING_FILE)

    max_bytes = settings.upload_max_bytes
    # Read one byte past the limit to detect oversize without trusting headers
    data = await file.read(max_bytes + 1)
    if not data:
        raise ValidationFailed(Messages.EMPTY_FILE)
    if len(data) > max_bytes:
        raise ValidationFailed(f"Max file size is {max_bytes} bytes")

    ext = image_ext_from_upload(file.content_type, file.filename)
    if not ext:
        raise ValidationFailed(Messages.UNSUPPORTED_IMAGE_TYPE)

    digest = hashlib.sha256(data).hexdigest()[:HASH_PREFIX_LEN]
    key = f"recipes/{slug}/hero.{digest}{ext}"

    if storage.resolve(key) is None:
        raise BadRequest(Messages.INVALID_PATH)

    cdn_path = storage.put_bytes(key, data)
    logger.info(f"Uploaded hero image for '{slug}': {cdn_path}")
    return {"data": {"cdnPath": cdn_path}}

# Recepti API Main Entry Point
import logging
import sys
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter
from slowapi.util import get_remote_address

from .settings import settings
from .errors import install_error_handlers
from .routers.ready import router as ready_router
from .routers.recipes import router as recipes_router
from .routers.uploads import router as uploads_router
from .routers.assets import router as assets_router
from .routers.dev import router as dev_router

# Configure structured logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger("recepti")

# Rate limiter (per-IP)
limiter = Limiter(key_func=get_remote_address)

app = FastAPI(title="Recepti API", version="0.1.0")
app.state.limiter = limiter
install_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ready_router, prefix="/api", tags=["ready"])
app.include_router(recipes_router, prefix="/api", tags=["recipes"])
app.include_router(uploads_router, prefix="/api", tags=["uploads"])
app.include_router(assets_router, prefix="/cdn", tags=["cdn"])
app.include_router(dev_router, prefix="/api", tags=["dev"])

logger.info(f"Serving CDN files from {settings.cdn_root}")

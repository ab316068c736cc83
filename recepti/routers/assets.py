"""Local CDN route: GET /cdn/{path} serves files from the storage root."""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Response

from ..deps import get_asset_server
from ..services.asset_server import AssetServer

router = APIRouter()


@router.get("/{path:path}", include_in_schema=False)
def serve_asset(
    path: str,
    if_none_match: Optional[str] = Header(None),
    if_modified_since: Optional[str] = Header(None),
    assets: AssetServer = Depends(get_asset_server),
):
    result = assets.serve(path, if_none_match=if_none_match, if_modified_since=if_modified_since)
    return Response(content=result.body, status_code=result.status_code, headers=result.headers)

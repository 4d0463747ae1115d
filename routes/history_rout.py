from typing import Any, Optional

from fastapi import APIRouter, Depends, Query

from db import get_db
from services.history.watch_srv import list_watch_history
from utils.response_ut import ok
from utils.security_ut import Viewer, get_current_viewer

router = APIRouter(tags=["history"])


@router.get("/history")
async def history_page(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    db=Depends(get_db),
    viewer: Optional[Viewer] = Depends(get_current_viewer),
) -> Any:
    data = await list_watch_history(db, viewer, page=page, limit=limit)
    return ok(**data)

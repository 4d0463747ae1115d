from typing import Any, Optional

from fastapi import APIRouter, Depends

from db import get_db
from services.history.watch_srv import record_watch
from utils.response_ut import ok
from utils.security_ut import Viewer, get_current_viewer

router = APIRouter(tags=["watch"])


@router.post("/videos/{video_id}/views")
async def watch_record_view(
    video_id: str,
    db=Depends(get_db),
    viewer: Optional[Viewer] = Depends(get_current_viewer),
) -> Any:
    # Player calls this once playback actually starts
    result = await record_watch(db, viewer, video_id)
    return ok(**result)

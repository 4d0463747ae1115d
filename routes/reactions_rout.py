from typing import Any, Optional

from fastapi import APIRouter, Depends

from db import get_db
from services.reactions.like_srv import toggle_video_like
from utils.response_ut import ok
from utils.security_ut import Viewer, get_current_viewer

router = APIRouter(prefix="/videos", tags=["reactions"])


@router.post("/{video_id}/like")
async def like_video(
    video_id: str,
    db=Depends(get_db),
    viewer: Optional[Viewer] = Depends(get_current_viewer),
) -> Any:
    state = await toggle_video_like(db, viewer, video_id)
    return ok(**state)

from typing import Any, Dict, List, Optional, Tuple, Union

from config.config import settings
from db.videos_db import get_video
from db.videos_query_db import SORTABLE_FIELDS, build_feed_pipeline, fetch_feed_page, sample_next_videos
from services.videos.detail_srv import can_see_video
from utils.errors_ut import NotFoundError, ValidationError
from utils.objid_ut import parse_object_id
from utils.pagination_ut import build_page, normalize_page, normalize_page_size, optional_str, page_offset
from utils.security_ut import Viewer


def _sort_args(sort_by: Optional[str], sort_type: Optional[str]) -> Tuple[Optional[str], Optional[int]]:
    """
    Both parts are needed to override the default newest-first order.
    """
    field = optional_str(sort_by)
    kind = optional_str(sort_type)
    if not field or not kind:
        return None, None
    if field not in SORTABLE_FIELDS:
        raise ValidationError(f"Cannot sort by {field}")
    kind = kind.lower()
    if kind not in ("asc", "desc"):
        raise ValidationError("sort_type must be asc or desc")
    return field, 1 if kind == "asc" else -1


async def list_videos(
    db,
    page: Union[int, str, None] = 1,
    limit: Union[int, str, None] = None,
    query: Optional[str] = None,
    user_id: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_type: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Published videos, paginated, newest first unless a sort is requested.
    Every argument is validated before the database is queried.
    """
    p = normalize_page(page)
    ps = normalize_page_size(limit)
    q = optional_str(query)
    owner_raw = optional_str(user_id)
    owner_id = parse_object_id(owner_raw, "user id") if owner_raw else None
    field, direction = _sort_args(sort_by, sort_type)

    pipeline = build_feed_pipeline(
        query=q,
        owner_id=owner_id,
        sort_by=field,
        direction=direction,
        search_backend=settings.SEARCH_BACKEND,
        search_index=settings.SEARCH_INDEX_NAME,
    )
    items, total = await fetch_feed_page(db, pipeline, limit=ps, offset=page_offset(p, ps))
    return build_page(items, total, p, ps)


async def list_next_videos(
    db,
    video_id: Optional[str],
    size: Optional[int] = None,
    viewer: Optional[Viewer] = None,
) -> List[Dict[str, Any]]:
    """
    Random published picks to play after the given video.
    A draft counts as missing unless the viewer owns it.
    """
    vid = parse_object_id(video_id, "video id")
    video = await get_video(db, vid)
    if not video or not can_see_video(video, viewer):
        raise NotFoundError("Video not found")
    return await sample_next_videos(db, vid, size or settings.NEXT_VIDEOS_SIZE)

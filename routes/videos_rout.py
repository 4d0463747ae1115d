from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from db import get_db
from services.feed.listing_srv import list_next_videos, list_videos
from services.media.base_srv import MediaProvider
from services.media.build_client_srv import get_media
from services.videos.detail_srv import get_video_detail
from services.videos.manage_srv import delete_video, publish_video, toggle_publish_status, update_video
from utils.form_ut import bool_from_form
from utils.response_ut import ok
from utils.security_ut import Viewer, get_current_viewer
from utils.upload_ut import discard_temp, save_upload

router = APIRouter(prefix="/videos", tags=["videos"])


# Query values arrive as raw strings; the services own validation
@router.get("")
async def videos_list(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    query: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_type: Optional[str] = Query(None, alias="sortType"),
    user_id: Optional[str] = Query(None, alias="userId"),
    db=Depends(get_db),
) -> Any:
    data = await list_videos(
        db,
        page=page,
        limit=limit,
        query=query,
        user_id=user_id,
        sort_by=sort_by,
        sort_type=sort_type,
    )
    return ok(**data)


@router.post("", status_code=201)
async def videos_publish(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    is_published: Optional[str] = Form(None),
    video_file: Optional[UploadFile] = File(None),
    thumbnail: Optional[UploadFile] = File(None),
    db=Depends(get_db),
    media: MediaProvider = Depends(get_media),
    viewer: Optional[Viewer] = Depends(get_current_viewer),
) -> Any:
    video_path = await save_upload(video_file, prefix="video_")
    thumb_path = await save_upload(thumbnail, prefix="thumb_")
    try:
        video = await publish_video(db, media, viewer, title, description, is_published, video_path, thumb_path)
    finally:
        discard_temp([video_path, thumb_path])
    return ok(video=video)


@router.get("/{video_id}")
async def videos_detail(
    video_id: str,
    guest: Optional[str] = Query(None),
    db=Depends(get_db),
    viewer: Optional[Viewer] = Depends(get_current_viewer),
) -> Any:
    video = await get_video_detail(db, video_id, viewer=viewer, guest=bool(bool_from_form(guest)))
    return ok(video=video)


@router.get("/{video_id}/guest")
async def videos_detail_guest(video_id: str, db=Depends(get_db)) -> Any:
    video = await get_video_detail(db, video_id, viewer=None, guest=True)
    return ok(video=video)


@router.get("/{video_id}/next")
async def videos_next(
    video_id: str,
    size: Optional[int] = Query(None, ge=1, le=50),
    db=Depends(get_db),
    viewer: Optional[Viewer] = Depends(get_current_viewer),
) -> Any:
    items = await list_next_videos(db, video_id, size=size, viewer=viewer)
    return ok(items=items)


@router.patch("/{video_id}")
async def videos_update(
    video_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    thumbnail: Optional[UploadFile] = File(None),
    db=Depends(get_db),
    media: MediaProvider = Depends(get_media),
    viewer: Optional[Viewer] = Depends(get_current_viewer),
) -> Any:
    thumb_path = await save_upload(thumbnail, prefix="thumb_")
    try:
        video = await update_video(db, media, viewer, video_id, title, description, thumb_path)
    finally:
        discard_temp([thumb_path])
    return ok(video=video)


@router.delete("/{video_id}")
async def videos_delete(
    video_id: str,
    db=Depends(get_db),
    media: MediaProvider = Depends(get_media),
    viewer: Optional[Viewer] = Depends(get_current_viewer),
) -> Any:
    await delete_video(db, media, viewer, video_id)
    return ok(video_id=video_id)


@router.patch("/{video_id}/toggle-publish")
async def videos_toggle_publish(
    video_id: str,
    db=Depends(get_db),
    viewer: Optional[Viewer] = Depends(get_current_viewer),
) -> Any:
    video = await toggle_publish_status(db, viewer, video_id)
    return ok(video_id=video["_id"], is_published=video.get("is_published"))

"""
Owner-side video mutations: publish, edit, publish toggle and delete.

Media objects live outside MongoDB, so none of these calls is atomic across
both stores. Failures after a committed database write are reported, never
rolled back.
"""
import asyncio
import logging
from typing import Any, Awaitable, Dict, List, Optional, Tuple

from pymongo.errors import PyMongoError

from db.comments_db import delete_comments_for_video
from db.history_db import delete_history_for_video
from db.likes_db import delete_likes_for_video
from db.videos_db import delete_video as db_delete_video
from db.videos_db import get_video, insert_video, update_video_fields
from services.media.base_srv import MediaError, MediaProvider, StoredMedia
from utils.errors_ut import ForbiddenError, InternalError, NotFoundError, UpstreamError, ValidationError
from utils.form_ut import bool_from_form, require_fields
from utils.objid_ut import parse_object_id
from utils.security_ut import Viewer
from utils.time_ut import now_utc

logger = logging.getLogger(__name__)


def _require_viewer(viewer: Optional[Viewer]) -> Viewer:
    if viewer is None:
        raise ValidationError("Sign in to manage videos")
    return viewer


async def _owned_video(db, viewer: Viewer, video_id: Optional[str]) -> Dict[str, Any]:
    vid = parse_object_id(video_id, "video id")
    video = await get_video(db, vid)
    if not video:
        raise NotFoundError("Video not found")
    if video.get("owner") != viewer.user_id:
        raise ForbiddenError("You are not the owner of this video")
    return video


async def _settle(jobs: List[Tuple[str, Awaitable[Any]]]) -> Tuple[Dict[str, Any], List[str]]:
    """
    Run jobs concurrently and wait for all of them.
    Returns (results by label, labels that failed). Programming errors still raise.
    """
    outcomes = await asyncio.gather(*(job for _, job in jobs), return_exceptions=True)
    results: Dict[str, Any] = {}
    failed: List[str] = []
    for (label, _), outcome in zip(jobs, outcomes):
        if isinstance(outcome, (MediaError, PyMongoError)):
            logger.warning("%s step failed: %s", label, outcome)
            failed.append(label)
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            results[label] = outcome
    return results, failed


async def _discard_media(media: MediaProvider, file_id: str, label: str, resource_type: str = "image") -> None:
    try:
        await media.remove(file_id, resource_type)
    except MediaError as e:
        logger.warning("Orphaned media (%s) file_id=%s: %s", label, file_id, e)


async def publish_video(
    db,
    media: MediaProvider,
    viewer: Optional[Viewer],
    title: Optional[str],
    description: Optional[str],
    is_published: Any,
    video_path: Optional[str],
    thumbnail_path: Optional[str],
) -> Dict[str, Any]:
    viewer = _require_viewer(viewer)
    require_fields([title, description, is_published])
    published = bool_from_form(is_published)
    if published is None:
        raise ValidationError("is_published must be true or false")
    if not video_path:
        raise ValidationError("Video is required to publish")
    if not thumbnail_path:
        raise ValidationError("Thumbnail is required to publish")

    stored, failed = await _settle([
        ("video", media.store(video_path, "video")),
        ("thumbnail", media.store(thumbnail_path, "image")),
    ])
    if failed:
        for label, obj in stored.items():
            logger.warning("Orphaned media after failed publish (%s) file_id=%s", label, obj.file_id)
        raise UpstreamError(" ".join(f"Failed to upload {label}." for label in failed))

    video_file: StoredMedia = stored["video"]
    thumbnail: StoredMedia = stored["thumbnail"]
    now = now_utc()
    doc = {
        "video_file": {"url": video_file.url, "file_id": video_file.file_id},
        "thumbnail": {"url": thumbnail.url, "file_id": thumbnail.file_id},
        "duration": video_file.duration or 0,
        "title": title.strip(),
        "description": description.strip(),
        "is_published": published,
        "views": 0,
        "owner": viewer.user_id,
        "created_at": now,
        "updated_at": now,
    }
    try:
        video_id = await insert_video(db, doc)
    except PyMongoError as e:
        logger.warning("Video insert failed, removing uploaded media: %s", e)
        await _settle([
            ("video removal", media.remove(video_file.file_id, "video")),
            ("thumbnail removal", media.remove(thumbnail.file_id, "image")),
        ])
        raise UpstreamError("Failed to publish video") from e

    created = await get_video(db, video_id)
    if not created:
        raise InternalError("Failed to publish video")
    logger.info("Video published video_id=%s owner=%s published=%s", video_id, viewer.user_id, published)
    return created


async def update_video(
    db,
    media: MediaProvider,
    viewer: Optional[Viewer],
    video_id: Optional[str],
    title: Optional[str],
    description: Optional[str],
    thumbnail_path: Optional[str] = None,
) -> Dict[str, Any]:
    """
    The old thumbnail is removed only after the patch is committed; if the
    patch fails the freshly stored one is removed instead.
    """
    viewer = _require_viewer(viewer)
    require_fields([title, description])
    video = await _owned_video(db, viewer, video_id)

    patch: Dict[str, Any] = {
        "title": title.strip(),
        "description": description.strip(),
        "updated_at": now_utc(),
    }
    thumb: Optional[StoredMedia] = None
    if thumbnail_path:
        try:
            thumb = await media.store(thumbnail_path, "image")
        except MediaError as e:
            raise UpstreamError("Thumbnail uploading failed") from e
        patch["thumbnail"] = {"url": thumb.url, "file_id": thumb.file_id}

    try:
        updated = await update_video_fields(db, video["_id"], patch)
    except PyMongoError as e:
        if thumb:
            await _discard_media(media, thumb.file_id, "new thumbnail")
        raise UpstreamError("Video update failed") from e
    if not updated:
        if thumb:
            await _discard_media(media, thumb.file_id, "new thumbnail")
        raise NotFoundError("Video not found")

    old_id = (video.get("thumbnail") or {}).get("file_id")
    if thumb and old_id:
        await _discard_media(media, old_id, "old thumbnail")
    return updated


async def toggle_publish_status(db, viewer: Optional[Viewer], video_id: Optional[str]) -> Dict[str, Any]:
    viewer = _require_viewer(viewer)
    video = await _owned_video(db, viewer, video_id)
    updated = await update_video_fields(
        db,
        video["_id"],
        {"is_published": not bool(video.get("is_published")), "updated_at": now_utc()},
    )
    if not updated:
        raise NotFoundError("Video not found")
    logger.info("Publish status toggled video_id=%s published=%s", video["_id"], updated.get("is_published"))
    return updated


async def delete_video(db, media: MediaProvider, viewer: Optional[Viewer], video_id: Optional[str]) -> None:
    """
    Primary record first; dependants and both media objects only after it is gone.
    Cleanup failures surface as one UpstreamError; the video stays deleted.
    """
    viewer = _require_viewer(viewer)
    video = await _owned_video(db, viewer, video_id)
    vid = video["_id"]

    try:
        deleted = await db_delete_video(db, vid)
    except PyMongoError as e:
        raise UpstreamError("Video deletion failed") from e
    if not deleted:
        raise NotFoundError("Video not found")
    logger.info("Video deleted video_id=%s owner=%s", vid, viewer.user_id)

    _, failed = await _settle([
        ("likes", delete_likes_for_video(db, vid)),
        ("comments", delete_comments_for_video(db, vid)),
        ("watch history", delete_history_for_video(db, vid)),
        ("video file", media.remove((video.get("video_file") or {}).get("file_id"), "video")),
        ("thumbnail", media.remove((video.get("thumbnail") or {}).get("file_id"), "image")),
    ])
    if failed:
        raise UpstreamError("Video deleted, cleanup failed for: " + ", ".join(failed))

"""
LocalMediaProvider: stores files under a filesystem root served by nginx (or the app).
"""
import asyncio
import logging
import os
import secrets
import shutil
from typing import Optional

from services.media.base_srv import MediaError, StoredMedia
from services.media.probe_srv import probe_video_duration

log = logging.getLogger(__name__)


def _norm(rel: str) -> str:
    return (rel or "").strip().replace("\\", "/").lstrip("/")


def _discard(local_path: str) -> None:
    try:
        os.remove(local_path)
    except FileNotFoundError:
        pass
    except OSError as e:
        log.warning("temp file not removed path=%s err=%s", local_path, e)


class LocalMediaProvider:
    def __init__(self, abs_root: str, public_base_url: str = "/media") -> None:
        self.abs_root = abs_root
        self.public_base_url = public_base_url.rstrip("/")

    def to_abs(self, rel_path: str) -> str:
        return os.path.join(self.abs_root, _norm(rel_path))

    def url_for(self, rel_path: str) -> str:
        return f"{self.public_base_url}/{_norm(rel_path)}"

    async def store(self, local_path: str, resource_type: str = "auto") -> StoredMedia:
        if not local_path or not os.path.isfile(local_path):
            raise MediaError(f"local file not found: {local_path}")
        folder = resource_type if resource_type in ("video", "image") else "raw"
        ext = os.path.splitext(local_path)[1].lower()
        file_id = f"{folder}/{secrets.token_urlsafe(12)}{ext}"
        duration: Optional[float] = None
        try:
            if folder == "video":
                duration = await probe_video_duration(local_path)
            dst = self.to_abs(file_id)
            os.makedirs(os.path.dirname(dst), exist_ok=True)
            await asyncio.to_thread(shutil.copyfile, local_path, dst)
        except OSError as e:
            raise MediaError(f"store failed: {e}") from e
        finally:
            _discard(local_path)
        return StoredMedia(url=self.url_for(file_id), file_id=file_id, duration=duration)

    async def remove(self, file_id: str, resource_type: str = "image") -> None:
        if not file_id:
            return
        path = self.to_abs(file_id)
        try:
            await asyncio.to_thread(os.remove, path)
        except FileNotFoundError:
            return
        except OSError as e:
            raise MediaError(f"remove failed: {e}") from e

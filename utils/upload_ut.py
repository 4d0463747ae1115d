import logging
import os
import tempfile
from typing import Iterable, Optional

from fastapi import UploadFile

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


async def save_upload(upload: Optional[UploadFile], prefix: str = "upload_") -> Optional[str]:
    """
    Spool a multipart file to a local temp path for the media provider.
    Returns None when the field was not sent (or sent empty).
    """
    if upload is None or not (upload.filename or "").strip():
        return None
    ext = os.path.splitext(upload.filename)[1].lower()
    fd, path = tempfile.mkstemp(prefix=prefix, suffix=ext)
    with os.fdopen(fd, "wb") as out:
        while True:
            chunk = await upload.read(CHUNK_SIZE)
            if not chunk:
                break
            out.write(chunk)
    return path


def discard_temp(paths: Iterable[Optional[str]]) -> None:
    # Providers remove what they stored; this catches files never handed over
    for p in paths:
        if not p:
            continue
        try:
            os.remove(p)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("temp file not removed path=%s err=%s", p, e)

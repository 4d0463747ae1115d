"""
Build the media provider from (priority order):
1) Explicit 'kind' argument from main.py
2) Environment variable MEDIA_PROVIDER (read by config.media_cfg)
"""
from fastapi import Request

from config import media_cfg
from services.media.base_srv import MediaProvider
from services.media.cloudinary_srv import CloudinaryMediaProvider
from services.media.local_srv import LocalMediaProvider


def _resolve_kind(kind: str) -> str:
    if isinstance(kind, str) and kind.strip():
        return kind.strip().lower()
    return media_cfg.MEDIA_PROVIDER or "local"


def build_media_provider(kind: str = "") -> MediaProvider:
    k = _resolve_kind(kind)
    if k == "cloudinary":
        return CloudinaryMediaProvider(
            cloud_name=media_cfg.CLOUDINARY_CLOUD_NAME,
            api_key=media_cfg.CLOUDINARY_API_KEY,
            api_secret=media_cfg.CLOUDINARY_API_SECRET,
            timeout=media_cfg.CLOUDINARY_TIMEOUT_SEC,
        )
    if k == "local":
        return LocalMediaProvider(
            abs_root=media_cfg.MEDIA_FS_ROOT,
            public_base_url=media_cfg.MEDIA_PUBLIC_BASE_URL,
        )
    raise ValueError(f"Unsupported media provider: {k}")


def get_media(request: Request) -> MediaProvider:
    # Built once in main.py startup
    return request.app.state.media

"""
Media provider configuration (single source of truth).

- MEDIA_PROVIDER: "local" (default) or "cloudinary"

Local:
- MEDIA_FS_ROOT: absolute filesystem path where stored files land
- MEDIA_PUBLIC_BASE_URL: URL prefix the stored files are served under

Cloudinary:
- CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY, CLOUDINARY_API_SECRET
- CLOUDINARY_TIMEOUT_SEC: per-request timeout
"""

import os

MEDIA_PROVIDER: str = os.getenv("MEDIA_PROVIDER", "local").strip().lower()

MEDIA_FS_ROOT: str = os.getenv("MEDIA_FS_ROOT", "/var/lib/vidhub/media").strip()
MEDIA_PUBLIC_BASE_URL: str = os.getenv("MEDIA_PUBLIC_BASE_URL", "/media").strip()

CLOUDINARY_CLOUD_NAME: str = os.getenv("CLOUDINARY_CLOUD_NAME", "").strip()
CLOUDINARY_API_KEY: str = os.getenv("CLOUDINARY_API_KEY", "").strip()
CLOUDINARY_API_SECRET: str = os.getenv("CLOUDINARY_API_SECRET", "").strip()

try:
    CLOUDINARY_TIMEOUT_SEC: float = float(os.getenv("CLOUDINARY_TIMEOUT_SEC", "120").strip())
except Exception:
    CLOUDINARY_TIMEOUT_SEC = 120.0

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Protocol


class MediaError(Exception):
    pass


@dataclass(frozen=True)
class StoredMedia:
    url: str
    file_id: str
    duration: Optional[float] = None


class MediaProvider(Protocol):
    """
    Contract for the media host.
    store() consumes a local temp file (removed afterwards, on success or failure).
    Both calls may be slow, raise MediaError, and are not retried here.
    """

    async def store(self, local_path: str, resource_type: str = "auto") -> StoredMedia: ...
    async def remove(self, file_id: str, resource_type: str = "image") -> None: ...

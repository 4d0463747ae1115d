"""
CloudinaryMediaProvider: signed uploads/destroys against the Cloudinary REST API.
"""
import hashlib
import logging
import os
import time
from typing import Any, Dict, Optional

import httpx

from services.media.base_srv import MediaError, StoredMedia

log = logging.getLogger(__name__)

API_BASE = "https://api.cloudinary.com/v1_1"


def sign_params(params: Dict[str, Any], api_secret: str) -> str:
    """
    Cloudinary signature: sha1 over "k1=v1&k2=v2..." (keys sorted) followed by the secret.
    """
    to_sign = "&".join(f"{k}={params[k]}" for k in sorted(params) if params[k] not in (None, ""))
    return hashlib.sha1((to_sign + api_secret).encode("utf-8")).hexdigest()


def _discard(local_path: str) -> None:
    try:
        os.remove(local_path)
    except FileNotFoundError:
        pass
    except OSError as e:
        log.warning("temp file not removed path=%s err=%s", local_path, e)


class CloudinaryMediaProvider:
    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        timeout: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not (cloud_name and api_key and api_secret):
            raise RuntimeError("Cloudinary provider requires cloud name, api key and api secret")
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.timeout = timeout
        self._transport = transport

    def _endpoint(self, resource_type: str, action: str) -> str:
        return f"{API_BASE}/{self.cloud_name}/{resource_type}/{action}"

    def _signed(self, params: Dict[str, Any]) -> Dict[str, Any]:
        body = {**params, "timestamp": int(time.time())}
        body["signature"] = sign_params(body, self.api_secret)
        body["api_key"] = self.api_key
        return body

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def store(self, local_path: str, resource_type: str = "auto") -> StoredMedia:
        if not local_path or not os.path.isfile(local_path):
            raise MediaError(f"local file not found: {local_path}")
        try:
            with open(local_path, "rb") as fh:
                async with self._client() as client:
                    r = await client.post(
                        self._endpoint(resource_type, "upload"),
                        data=self._signed({}),
                        files={"file": (os.path.basename(local_path), fh)},
                    )
            r.raise_for_status()
            payload = r.json()
        except (httpx.HTTPError, OSError, ValueError) as e:
            raise MediaError(f"upload failed: {e}") from e
        finally:
            _discard(local_path)

        file_id = payload.get("public_id")
        url = payload.get("playback_url") or payload.get("secure_url") or payload.get("url")
        if not file_id or not url:
            raise MediaError("upload response is missing public_id or url")
        duration = payload.get("duration")
        return StoredMedia(
            url=url,
            file_id=file_id,
            duration=float(duration) if duration is not None else None,
        )

    async def remove(self, file_id: str, resource_type: str = "image") -> None:
        if not file_id:
            return
        try:
            async with self._client() as client:
                r = await client.post(
                    self._endpoint(resource_type, "destroy"),
                    data=self._signed({"public_id": file_id}),
                )
            r.raise_for_status()
            result = r.json().get("result")
        except (httpx.HTTPError, ValueError) as e:
            raise MediaError(f"destroy failed: {e}") from e
        if result not in ("ok", "not found"):
            raise MediaError(f"destroy rejected: {result}")

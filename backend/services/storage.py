import logging
import time
from typing import Optional

import httpx

from errors import ConfigError, UploadError

logger = logging.getLogger(__name__)


class StorageGateway:
    """Uploads raw files to the object store and returns their public URL"""

    def __init__(self, base_url: Optional[str], api_key: Optional[str],
                 http_client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip("/") if base_url else None
        self.api_key = api_key
        self.http_client = http_client

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.api_key)

    @staticmethod
    def build_key(file_name: str) -> str:
        """Timestamped key so two uploads of the same file never collide"""
        safe_name = file_name.replace("/", "_").replace("\\", "_").strip() or "document"
        return f"contracts/{int(time.time() * 1000)}-{safe_name}"

    async def put(self, key: str, data: bytes, content_type: str = "application/pdf") -> dict:
        if not self.configured:
            raise ConfigError("Storage not configured")

        url = f"{self.base_url}/v1/storage/upload"
        file_name = key.rsplit("/", 1)[-1]
        try:
            if self.http_client is not None:
                resp = await self._post(self.http_client, url, key, file_name, data, content_type)
            else:
                async with httpx.AsyncClient(timeout=60.0) as client:
                    resp = await self._post(client, url, key, file_name, data, content_type)
        except httpx.HTTPError as e:
            logger.warning("Storage upload of %s failed: %s", key, e)
            raise UploadError("upload failed") from e

        if resp.status_code >= 300:
            logger.warning("Storage returned %s for %s: %s", resp.status_code, key, resp.text[:200])
            raise UploadError(f"upload failed {resp.status_code}")

        try:
            file_url = resp.json()["url"]
        except (ValueError, KeyError, TypeError) as e:
            raise UploadError("upload failed: no URL in storage response") from e

        return {"key": key, "url": file_url}

    async def _post(self, client: httpx.AsyncClient, url: str, key: str, file_name: str,
                    data: bytes, content_type: str) -> httpx.Response:
        return await client.post(
            url,
            params={"path": key},
            headers={"Authorization": f"Bearer {self.api_key}"},
            files={"file": (file_name, data, content_type)},
        )

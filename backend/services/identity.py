import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class IdentityVerifier:
    """Resolves a bearer token to the identity provider's user record"""

    def __init__(self, base_url: Optional[str], api_key: Optional[str],
                 http_client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip("/") if base_url else None
        self.api_key = api_key
        self.http_client = http_client

    async def verify(self, token: str) -> Optional[dict]:
        """Return {id, email, name, login_method} or None for an invalid token"""
        if not token or not self.base_url:
            return None

        headers = {"Authorization": f"Bearer {token}"}
        if self.api_key:
            headers["apikey"] = self.api_key
        url = f"{self.base_url}/auth/v1/user"

        try:
            if self.http_client is not None:
                resp = await self.http_client.get(url, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=5.0) as client:
                    resp = await client.get(url, headers=headers)
        except httpx.HTTPError as e:
            logger.error("Identity provider unreachable: %s", e)
            return None

        if resp.status_code != 200:
            if resp.status_code != 401:
                logger.warning("Identity provider returned %s: %s", resp.status_code, resp.text[:200])
            return None

        data = resp.json()
        if not data.get("id"):
            return None
        metadata = data.get("user_metadata") or {}
        app_metadata = data.get("app_metadata") or {}
        return {
            "id": str(data["id"]),
            "email": data.get("email"),
            "name": metadata.get("full_name") or metadata.get("name"),
            "login_method": app_metadata.get("provider"),
        }

import logging
from typing import Optional
from urllib.parse import quote

import httpx

from app_distribution.core.config import settings


logger = logging.getLogger(__name__)


class GoogleService:
    """
    Minimal Google Drive v3 client: the backend only ever needs to remove
    uploaded binaries and hand out their media URLs.
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        download_base_url: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.access_token = access_token if access_token is not None else settings.GOOGLE_ACCESS_TOKEN
        self.base_url = (base_url or settings.GOOGLE_DRIVE_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.GOOGLE_TIMEOUT_SECONDS
        self.download_base_url = download_base_url or settings.GOOGLE_DRIVE_DOWNLOAD_URL
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            headers={"Authorization": f"Bearer {self.access_token}"},
            timeout=self.timeout,
            transport=self._transport,
        )

    def delete_file(self, file_id: str) -> None:
        url = f"{self.base_url}/files/{quote(file_id, safe='')}"

        with self._client() as client:
            try:
                resp = client.delete(url)
            except httpx.RequestError as e:
                logger.error("Failed to reach Google Drive deleting %s: %s", file_id, e)
                raise

        if resp.status_code not in (200, 204):
            logger.error(
                "Google Drive returned %s deleting %s: %s",
                resp.status_code, file_id, resp.text,
            )
        resp.raise_for_status()
        logger.info("Deleted Drive file %s", file_id)

    def public_url(self, file_id: str) -> str:
        """Link a device can fetch without credentials (file must be shared)."""
        url = httpx.URL(self.download_base_url, params={"export": "download", "id": file_id})
        return str(url)

"""Screenshot upload to object storage"""
import uuid
from typing import Optional

import httpx

from founders_cup.models import ScreenshotUpload, StorageSettings


class ScreenshotStorage:
    def __init__(
        self,
        upload_url: Optional[str],
        public_base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
    ):
        self.upload_url = upload_url.rstrip("/") if upload_url else None
        self.public_base_url = (public_base_url or upload_url or "").rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: StorageSettings) -> "ScreenshotStorage":
        return cls(settings.upload_url, settings.public_base_url, settings.api_key, settings.timeout)

    async def upload(self, screenshot: ScreenshotUpload, key_prefix: str) -> str:
        """PUT the file under <key_prefix><uuid>-<filename> and return its public URL"""
        if not self.upload_url:
            raise RuntimeError("Storage upload URL is not configured")

        filename = screenshot.filename.replace("/", "_") or "screenshot"
        key = f"{key_prefix}{uuid.uuid4().hex}-{filename}"
        headers = {"Content-Type": screenshot.content_type or "application/octet-stream"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.put(f"{self.upload_url}/{key}", content=screenshot.content, headers=headers)
            response.raise_for_status()

        return f"{self.public_base_url}/{key}"

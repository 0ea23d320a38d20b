"""Supabase Storage backend, talking to the object storage REST API over httpx."""

from __future__ import annotations

import httpx

from lector_common.logging import get_logger

from ..errors import NotFoundError, StorageError
from .base import AudioStore

log = get_logger(__name__)


class SupabaseAudioStore(AudioStore):
    """Objects live in one bucket; keys are object paths inside it."""

    def __init__(
        self,
        url: str,
        service_key: str,
        bucket: str = "audio-files",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url.rstrip("/")
        self._service_key = service_key
        self._bucket = bucket
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def name(self) -> str:
        return "supabase"

    async def start(self) -> None:
        if not self._url or not self._service_key:
            raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_KEY are required for the supabase backend")
        self._client = httpx.AsyncClient(
            base_url=f"{self._url}/storage/v1",
            headers={
                "Authorization": f"Bearer {self._service_key}",
                "apikey": self._service_key,
            },
            timeout=self._timeout,
            transport=self._transport,
        )
        log.info("audio_store_ready", backend=self.name, bucket=self._bucket)

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError("SupabaseAudioStore not started")
        return self._client

    async def put(self, key: str, data: bytes, content_type: str = "audio/mpeg") -> str:
        try:
            resp = await self.client.post(
                f"/object/{self._bucket}/{key}",
                content=data,
                headers={"Content-Type": content_type, "x-upsert": "false"},
            )
        except httpx.HTTPError as e:
            raise StorageError(f"Failed to store audio file: {e}") from e
        if not resp.is_success:
            raise StorageError(f"Failed to store audio file: {resp.status_code} {resp.text}")
        return key

    async def get(self, key: str) -> bytes:
        try:
            resp = await self.client.get(f"/object/{self._bucket}/{key}")
        except httpx.HTTPError as e:
            raise StorageError(f"Failed to read audio file: {e}") from e
        # Storage API reports missing objects as 400 or 404 depending on version
        if resp.status_code in (400, 404):
            raise NotFoundError(f"Audio file not found: {key}")
        if not resp.is_success:
            raise StorageError(f"Failed to read audio file: {resp.status_code} {resp.text}")
        return resp.content

    async def delete(self, key: str) -> None:
        try:
            resp = await self.client.request(
                "DELETE",
                f"/object/{self._bucket}",
                json={"prefixes": [key]},
            )
        except httpx.HTTPError as e:
            raise StorageError(f"Failed to delete audio file: {e}") from e
        if not resp.is_success:
            raise StorageError(f"Failed to delete audio file: {resp.status_code} {resp.text}")

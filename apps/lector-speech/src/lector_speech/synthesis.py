"""HTTP client for the ElevenLabs text-to-speech backend."""

from __future__ import annotations

from urllib.parse import quote

import httpx

from lector_common.logging import get_logger

from .errors import SynthesisError
from .schemas import VoiceSettings

log = get_logger(__name__)


class ElevenLabsClient:
    """One synthesis call per chunk. No retries; the caller decides what a failure means."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.elevenlabs.io",
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def name(self) -> str:
        return "elevenlabs"

    async def start(self) -> None:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError("ElevenLabsClient not started")
        return self._client

    async def synthesize(
        self,
        text: str,
        voice_id: str,
        model_id: str,
        voice_settings: VoiceSettings,
    ) -> bytes:
        """Synthesize one chunk of text. Returns MP3 bytes."""
        if not self._api_key:
            raise SynthesisError("ElevenLabs API key not configured", status=500)

        try:
            resp = await self.client.post(
                f"/v1/text-to-speech/{quote(voice_id, safe='')}",
                headers={
                    "Accept": "audio/mpeg",
                    "Content-Type": "application/json",
                    "xi-api-key": self._api_key,
                },
                json={
                    "text": text,
                    "model_id": model_id,
                    "voice_settings": voice_settings.model_dump(),
                },
            )
        except httpx.HTTPError as e:
            log.error("synthesis_call_failed", voice_id=voice_id, error=str(e))
            raise SynthesisError(f"ElevenLabs API unreachable: {e}", status=502) from e

        if not resp.is_success:
            log.error("synthesis_backend_error", status=resp.status_code, body=resp.text[:500])
            raise SynthesisError(
                f"ElevenLabs API error: {resp.status_code} {resp.text}",
                status=resp.status_code,
            )

        return resp.content

"""Google Translate v2 client used to translate text before synthesis."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from lector_common.logging import get_logger

from .catalog import is_supported_language
from .errors import TranslationError, ValidationError

log = get_logger(__name__)


@dataclass(frozen=True)
class Translation:
    translated_text: str
    detected_language: str | None
    original_text: str


class GoogleTranslateClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = "https://translation.googleapis.com",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

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
            raise RuntimeError("GoogleTranslateClient not started")
        return self._client

    async def translate(
        self, text: str, target_language: str, source_language: str = "auto"
    ) -> Translation:
        if not text.strip() or not target_language:
            raise ValidationError("Text and target language are required")
        if not is_supported_language(target_language):
            raise ValidationError(f"Unsupported target language: {target_language}")
        if not self._api_key:
            raise TranslationError("Google Translate API key not configured", status_code=500)

        body = {"q": text, "target": target_language, "format": "text"}
        # Leaving source out lets the backend detect it
        if source_language and source_language != "auto":
            body["source"] = source_language

        try:
            resp = await self.client.post(
                "/language/translate/v2",
                params={"key": self._api_key},
                json=body,
            )
        except httpx.HTTPError as e:
            log.error("translate_call_failed", error=str(e))
            raise TranslationError(f"Translation failed: {e}") from e

        if not resp.is_success:
            try:
                message = resp.json().get("error", {}).get("message") or "Unknown error"
            except (ValueError, AttributeError):
                message = resp.text or "Unknown error"
            log.error("translate_backend_error", status=resp.status_code, message=message)
            raise TranslationError(f"Translation failed: {message}")

        try:
            translation = resp.json()["data"]["translations"][0]
            result = Translation(
                translated_text=translation["translatedText"],
                detected_language=translation.get("detectedSourceLanguage"),
                original_text=text,
            )
        except (ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            log.error("translate_bad_response", error=repr(e), body=resp.text[:500])
            raise TranslationError("Translation failed: unexpected response") from e
        log.info(
            "translation_complete",
            original_length=len(text),
            translated_length=len(result.translated_text),
            detected_language=result.detected_language,
        )
        return result

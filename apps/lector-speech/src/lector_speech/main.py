"""FastAPI application for lector-speech."""

from __future__ import annotations

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI

from lector_common.errors import install_error_handlers
from lector_common.health import create_health_router
from lector_common.logging import setup_logging
from lector_common.middleware import add_common_middleware

from .config import settings
from .history import HistoryStore
from .identity import CallerResolver
from .pipeline import SynthesisPipeline
from .routes import router as speech_router, set_components
from .storage.base import AudioStore
from .synthesis import ElevenLabsClient
from .translation import GoogleTranslateClient

VERSION = "0.1.0"


def _create_store() -> AudioStore:
    """Create the audio store selected by STORAGE_BACKEND."""
    if settings.storage_backend == "local":
        from .storage.local import LocalAudioStore
        return LocalAudioStore(settings.audio_dir)
    elif settings.storage_backend == "supabase":
        from .storage.supabase import SupabaseAudioStore
        return SupabaseAudioStore(
            settings.supabase_url,
            settings.supabase_service_key,
            bucket=settings.storage_bucket,
            timeout=settings.storage_timeout,
        )
    else:
        raise ValueError(f"Unknown storage backend: {settings.storage_backend}")


_synthesizer = ElevenLabsClient(
    api_key=settings.elevenlabs_api_key,
    base_url=settings.elevenlabs_base_url,
    timeout=settings.synthesis_timeout,
)
_translator = GoogleTranslateClient(
    api_key=settings.translate_api_key,
    base_url=settings.translate_base_url,
    timeout=settings.translate_timeout,
)
_history = HistoryStore(settings.history_db_path)
_identity = CallerResolver(settings.jwt_secret, audience=settings.jwt_audience)
_store: AudioStore | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    global _store
    setup_logging("lector-speech", settings.log_level, json_output=settings.log_format == "json")

    # Ensure data directories exist
    os.makedirs(os.path.dirname(settings.history_db_path) or ".", exist_ok=True)

    _store = _create_store()
    await _store.start()
    await _history.init()
    await _synthesizer.start()
    await _translator.start()

    set_components(
        pipeline=SynthesisPipeline(
            _synthesizer,
            _store,
            _history,
            _identity,
            max_chunk_chars=settings.max_chunk_chars,
        ),
        store=_store,
        history=_history,
        identity=_identity,
        translator=_translator,
    )

    yield

    set_components()
    await _translator.close()
    await _synthesizer.close()
    await _history.close()
    await _store.close()


def _health_details() -> dict:
    return {
        "synthesis_backend": _synthesizer.name,
        "storage_backend": _store.name if _store else None,
        "identity_enabled": _identity.enabled,
        "max_chunk_chars": settings.max_chunk_chars,
    }


app = FastAPI(title="lector-speech", version=VERSION, lifespan=lifespan)

add_common_middleware(app, settings.cors_origins)
install_error_handlers(app)
app.include_router(create_health_router("lector-speech", VERSION, details_fn=_health_details))
app.include_router(speech_router)

"""Speech API routes: synthesis, translation, catalogs and history."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from lector_common.auth import BearerToken
from lector_common.logging import get_logger

from .catalog import LANGUAGES, MODELS, VOICES
from .errors import NotFoundError, StorageError
from .history import HistoryRecord, HistoryStore
from .identity import CallerResolver
from .pipeline import CONTENT_TYPE, SynthesisPipeline
from .schemas import (
    CatalogEntry,
    ChunkPayload,
    HistoryItem,
    SynthesisRequest,
    SynthesisResponse,
    TranslateRequest,
    TranslateResponse,
)
from .storage.base import AudioStore
from .translation import GoogleTranslateClient

log = get_logger(__name__)

router = APIRouter(prefix="/v1", tags=["speech"])

_pipeline: SynthesisPipeline | None = None
_store: AudioStore | None = None
_history: HistoryStore | None = None
_identity: CallerResolver | None = None
_translator: GoogleTranslateClient | None = None


def get_pipeline() -> SynthesisPipeline:
    if _pipeline is None:
        raise HTTPException(status_code=503, detail="Synthesis pipeline not initialized")
    return _pipeline


def get_store() -> AudioStore:
    if _store is None:
        raise HTTPException(status_code=503, detail="Audio store not initialized")
    return _store


def get_history() -> HistoryStore:
    if _history is None:
        raise HTTPException(status_code=503, detail="History store not initialized")
    return _history


def get_identity() -> CallerResolver:
    if _identity is None:
        raise HTTPException(status_code=503, detail="Caller resolver not initialized")
    return _identity


def get_translator() -> GoogleTranslateClient:
    if _translator is None:
        raise HTTPException(status_code=503, detail="Translation client not initialized")
    return _translator


def set_components(
    *,
    pipeline: SynthesisPipeline | None = None,
    store: AudioStore | None = None,
    history: HistoryStore | None = None,
    identity: CallerResolver | None = None,
    translator: GoogleTranslateClient | None = None,
) -> None:
    global _pipeline, _store, _history, _identity, _translator
    _pipeline = pipeline
    _store = store
    _history = history
    _identity = identity
    _translator = translator


@router.post("/text-to-speech", response_model=SynthesisResponse)
async def text_to_speech(
    req: SynthesisRequest,
    token: BearerToken,
    pipeline: SynthesisPipeline = Depends(get_pipeline),
) -> SynthesisResponse:
    """Synthesize arbitrary-length text. Each chunk's audio comes back base64-encoded."""
    result = await pipeline.run(req, bearer_token=token)
    return SynthesisResponse(
        chunks=[
            ChunkPayload(
                index=c.index,
                audio_data=c.audio_data,
                file_path=c.file_path,
                size=c.size,
                text_length=c.text_length,
            )
            for c in result.chunks
        ],
        total_chunks=result.total_chunks,
        content_type=result.content_type,
        history_id=result.history_id,
    )


@router.post("/translate", response_model=TranslateResponse)
async def translate(
    req: TranslateRequest,
    translator: GoogleTranslateClient = Depends(get_translator),
) -> TranslateResponse:
    result = await translator.translate(req.text, req.target_language, req.source_language)
    return TranslateResponse(
        translated_text=result.translated_text,
        detected_language=result.detected_language,
        original_text=result.original_text,
    )


@router.get("/voices", response_model=list[CatalogEntry])
async def list_voices() -> list[CatalogEntry]:
    return [CatalogEntry(id=vid, name=name) for vid, name in VOICES.items()]


@router.get("/models", response_model=list[CatalogEntry])
async def list_models() -> list[CatalogEntry]:
    return [CatalogEntry(id=mid, name=name) for mid, name in MODELS.items()]


@router.get("/languages", response_model=list[CatalogEntry])
async def list_languages() -> list[CatalogEntry]:
    return [CatalogEntry(id=code, name=name) for code, name in LANGUAGES.items()]


def _to_item(record: HistoryRecord) -> HistoryItem:
    return HistoryItem(
        id=record.id,
        text_content=record.text_content,
        voice_id=record.voice_id,
        voice_name=record.voice_name,
        model_id=record.model_id,
        file_path=record.file_path,
        file_size=record.file_size,
        chunk_count=record.chunk_count,
        created_at=record.created_at,
    )


async def _owned_record(
    record_id: str, token: str | None, history: HistoryStore, identity: CallerResolver
) -> HistoryRecord:
    record = await history.get(record_id)
    # Records of other callers are indistinguishable from missing ones
    if record is None or record.caller_id != identity.resolve(token):
        raise NotFoundError("History entry not found")
    return record


@router.get("/history", response_model=list[HistoryItem])
async def list_history(
    token: BearerToken,
    limit: int = Query(50, ge=1, le=500),
    history: HistoryStore = Depends(get_history),
    identity: CallerResolver = Depends(get_identity),
) -> list[HistoryItem]:
    """List the caller's synthesis history, newest first."""
    records = await history.list_for_caller(identity.resolve(token), limit=limit)
    return [_to_item(r) for r in records]


@router.get("/history/{record_id}/audio")
async def get_history_audio(
    record_id: str,
    token: BearerToken,
    history: HistoryStore = Depends(get_history),
    identity: CallerResolver = Depends(get_identity),
    store: AudioStore = Depends(get_store),
) -> Response:
    """Download the audio a history entry points at."""
    record = await _owned_record(record_id, token, history, identity)
    audio = await store.get(record.file_path)
    return Response(content=audio, media_type=CONTENT_TYPE)


@router.delete("/history/{record_id}")
async def delete_history(
    record_id: str,
    token: BearerToken,
    history: HistoryStore = Depends(get_history),
    identity: CallerResolver = Depends(get_identity),
    store: AudioStore = Depends(get_store),
) -> dict:
    """Delete a history entry and its stored audio."""
    record = await _owned_record(record_id, token, history, identity)

    try:
        await store.delete(record.file_path)
    except (NotFoundError, StorageError) as e:
        # The record goes away even if the object is already gone or unreachable
        log.warning("history_audio_delete_failed", record_id=record_id, file_path=record.file_path, error=str(e))

    if not await history.delete(record_id):
        raise NotFoundError("History entry not found")
    log.info("history_deleted", record_id=record_id)
    return {"success": True, "id": record_id}

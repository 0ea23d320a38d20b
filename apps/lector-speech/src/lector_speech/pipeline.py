"""Chunked synthesis pipeline: validate -> chunk -> (synthesize -> store)* -> record.

Chunks are processed strictly one after another so the audio sequence keeps
the text order and each request holds at most one call against the
rate-limited backend. The first synthesis or storage failure aborts the run.
Chunks already stored by then stay in storage. A failed history write is
logged and the run still completes.
"""

from __future__ import annotations

import base64
import re
from dataclasses import dataclass, field
from enum import Enum

from lector_common.logging import get_logger

from .catalog import CUSTOM_VOICE, resolve_voice_name
from .chunker import TextChunk, split_into_chunks
from .errors import RecordError, ValidationError
from .history import HistoryEntry, HistoryStore
from .identity import CallerResolver
from .schemas import SynthesisRequest
from .storage.base import AudioStore, build_storage_key
from .synthesis import ElevenLabsClient

log = get_logger(__name__)

CONTENT_TYPE = "audio/mpeg"

_VOICE_ID_RE = re.compile(r"[A-Za-z0-9_-]+")


class PipelineState(str, Enum):
    VALIDATING = "validating"
    CHUNKING = "chunking"
    SYNTHESIZING = "synthesizing"
    STORING = "storing"
    RECORDING = "recording"
    COMPLETED = "completed"
    ABORTED = "aborted"


_TRANSITIONS: dict[PipelineState, frozenset[PipelineState]] = {
    PipelineState.VALIDATING: frozenset({PipelineState.CHUNKING}),
    PipelineState.CHUNKING: frozenset({PipelineState.SYNTHESIZING}),
    PipelineState.SYNTHESIZING: frozenset({PipelineState.STORING, PipelineState.ABORTED}),
    PipelineState.STORING: frozenset(
        {PipelineState.SYNTHESIZING, PipelineState.RECORDING, PipelineState.ABORTED}
    ),
    PipelineState.RECORDING: frozenset({PipelineState.COMPLETED}),
    PipelineState.COMPLETED: frozenset(),
    PipelineState.ABORTED: frozenset(),
}


@dataclass(frozen=True)
class ChunkResult:
    index: int
    audio_data: str  # base64; raw bytes are dropped once stored
    file_path: str
    size: int
    text_length: int


@dataclass(frozen=True)
class PipelineResult:
    chunks: list[ChunkResult]
    caller_id: str | None
    history_id: str | None
    content_type: str = CONTENT_TYPE

    @property
    def total_chunks(self) -> int:
        return len(self.chunks)

    @property
    def total_size(self) -> int:
        return sum(c.size for c in self.chunks)


@dataclass
class PipelineRun:
    """Request-scoped state of one pipeline execution."""

    request: SynthesisRequest
    state: PipelineState = PipelineState.VALIDATING
    caller_id: str | None = None
    voice_id: str = ""
    chunks: list[TextChunk] = field(default_factory=list)
    results: list[ChunkResult] = field(default_factory=list)
    history_id: str | None = None
    visited: list[PipelineState] = field(default_factory=lambda: [PipelineState.VALIDATING])

    def advance(self, state: PipelineState) -> None:
        if state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal pipeline transition {self.state.value} -> {state.value}")
        self.state = state
        self.visited.append(state)

    @property
    def stored_keys(self) -> list[str]:
        return [r.file_path for r in self.results]


def resolve_voice_id(request: SynthesisRequest) -> str:
    """Pick the effective voice id, rejecting empty or malformed ones."""
    if request.voice_id == CUSTOM_VOICE:
        voice_id = (request.custom_voice_id or "").strip()
        if not voice_id:
            raise ValidationError("Custom voice ID is required")
    else:
        voice_id = request.voice_id.strip()
        if not voice_id:
            raise ValidationError("Voice ID is required")
    # Voice ids end up as a URL path segment
    if not _VOICE_ID_RE.fullmatch(voice_id):
        raise ValidationError("Invalid voice ID")
    return voice_id


class SynthesisPipeline:
    """Drives one synthesis request through chunking, synthesis, storage and history."""

    def __init__(
        self,
        synthesizer: ElevenLabsClient,
        store: AudioStore,
        recorder: HistoryStore,
        identity: CallerResolver,
        max_chunk_chars: int = 10000,
    ) -> None:
        self._synthesizer = synthesizer
        self._store = store
        self._recorder = recorder
        self._identity = identity
        self._max_chunk_chars = max_chunk_chars

    async def run(self, request: SynthesisRequest, bearer_token: str | None = None) -> PipelineResult:
        run = PipelineRun(request=request)
        await self.execute(run, bearer_token)
        return PipelineResult(
            chunks=list(run.results),
            caller_id=run.caller_id,
            history_id=run.history_id,
        )

    async def execute(self, run: PipelineRun, bearer_token: str | None = None) -> None:
        """Run the state machine on ``run``. Raises the first fatal error."""
        if not run.request.text.strip():
            raise ValidationError("Text is required")
        run.voice_id = resolve_voice_id(run.request)
        run.caller_id = self._identity.resolve(bearer_token)

        run.advance(PipelineState.CHUNKING)
        run.chunks = split_into_chunks(run.request.text, self._max_chunk_chars)
        log.info(
            "pipeline_started",
            text_length=len(run.request.text),
            chunks=len(run.chunks),
            voice_id=run.voice_id,
            model_id=run.request.model_id,
            caller_id=run.caller_id,
        )

        for chunk in run.chunks:
            await self._process_chunk(run, chunk)

        run.advance(PipelineState.RECORDING)
        run.history_id = await self._record(run)
        run.advance(PipelineState.COMPLETED)

        log.info(
            "pipeline_completed",
            chunks=len(run.results),
            total_size=sum(r.size for r in run.results),
            history_id=run.history_id,
        )

    async def _process_chunk(self, run: PipelineRun, chunk: TextChunk) -> None:
        run.advance(PipelineState.SYNTHESIZING)
        try:
            audio = await self._synthesizer.synthesize(
                chunk.content,
                run.voice_id,
                run.request.model_id,
                run.request.voice_settings,
            )
        except Exception as e:
            self._abort(run, chunk, e)
            raise

        run.advance(PipelineState.STORING)
        key = build_storage_key(run.caller_id, chunk.index)
        try:
            file_path = await self._store.put(key, audio, CONTENT_TYPE)
        except Exception as e:
            self._abort(run, chunk, e)
            raise

        run.results.append(
            ChunkResult(
                index=chunk.index,
                audio_data=base64.b64encode(audio).decode("ascii"),
                file_path=file_path,
                size=len(audio),
                text_length=chunk.length,
            )
        )
        log.info(
            "chunk_stored",
            index=chunk.index,
            of=len(run.chunks),
            size_bytes=len(audio),
            text_length=chunk.length,
            file_path=file_path,
        )

    def _abort(self, run: PipelineRun, chunk: TextChunk, error: Exception) -> None:
        failed_in = run.state
        run.advance(PipelineState.ABORTED)
        # Stored chunks are left in place; the failure response does not reference them
        log.warning(
            "pipeline_aborted",
            failed_in=failed_in.value,
            chunk_index=chunk.index,
            error=str(error),
            orphaned_keys=run.stored_keys,
        )

    async def _record(self, run: PipelineRun) -> str | None:
        """Persist the history row. Failure is logged, never raised."""
        entry = HistoryEntry(
            caller_id=run.caller_id,
            text_content=run.request.text,
            voice_id=run.voice_id,
            voice_name=resolve_voice_name(run.voice_id),
            model_id=run.request.model_id,
            file_path=run.results[0].file_path,
            file_size=sum(r.size for r in run.results),
            chunk_count=len(run.results),
        )
        try:
            history_id = await self._recorder.record(entry)
        except RecordError as e:
            log.error("history_record_failed", error=str(e), file_path=entry.file_path)
            return None
        log.info("history_recorded", history_id=history_id, file_size=entry.file_size)
        return history_id

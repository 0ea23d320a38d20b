"""Request/response schemas for the speech service."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .catalog import DEFAULT_MODEL

_camel = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VoiceSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    stability: float = Field(0.5, ge=0.0, le=1.0)
    similarity_boost: float = Field(0.75, ge=0.0, le=1.0)
    style: float = 0.0
    use_speaker_boost: bool = True


class SynthesisRequest(BaseModel):
    # model_id is a backend field name, not a pydantic one
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    text: str
    voice_id: str = "nPczCjzI2devNBz1zQrb"
    custom_voice_id: str | None = None  # used when voice_id == "custom"
    model_id: str = DEFAULT_MODEL
    voice_settings: VoiceSettings = Field(default_factory=VoiceSettings)


class ChunkPayload(BaseModel):
    model_config = _camel

    index: int
    audio_data: str  # base64
    file_path: str
    size: int
    text_length: int


class SynthesisResponse(BaseModel):
    model_config = _camel

    success: bool = True
    chunks: list[ChunkPayload]
    total_chunks: int
    content_type: str = "audio/mpeg"
    history_id: str | None = None


class TranslateRequest(BaseModel):
    model_config = _camel

    text: str
    target_language: str
    source_language: str = "auto"


class TranslateResponse(BaseModel):
    model_config = _camel

    success: bool = True
    translated_text: str
    detected_language: str | None = None
    original_text: str


class CatalogEntry(BaseModel):
    id: str
    name: str


class HistoryItem(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    id: str
    text_content: str
    voice_id: str
    voice_name: str
    model_id: str
    file_path: str
    file_size: int
    chunk_count: int
    created_at: str

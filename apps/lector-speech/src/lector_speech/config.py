"""Configuration for lector-speech service."""

from __future__ import annotations

from lector_common.config import get_env, get_env_float, get_env_int, get_env_list


class SpeechConfig:
    """Speech service configuration from environment variables."""

    # Synthesis backend (ElevenLabs)
    elevenlabs_api_key: str = get_env("ELEVENLABS_API_KEY")
    elevenlabs_base_url: str = get_env("ELEVENLABS_BASE_URL", "https://api.elevenlabs.io")
    synthesis_timeout: float = get_env_float("SYNTHESIS_TIMEOUT", 120.0)

    # Backend's practical per-call text ceiling
    max_chunk_chars: int = get_env_int("MAX_CHUNK_CHARS", 10000)

    # Audio storage: local or supabase
    storage_backend: str = get_env("STORAGE_BACKEND", "local")
    audio_dir: str = get_env("AUDIO_DIR", "data/audio")
    supabase_url: str = get_env("SUPABASE_URL")
    supabase_service_key: str = get_env("SUPABASE_SERVICE_KEY")
    storage_bucket: str = get_env("STORAGE_BUCKET", "audio-files")
    storage_timeout: float = get_env_float("STORAGE_TIMEOUT", 30.0)

    # History records
    history_db_path: str = get_env("HISTORY_DB_PATH", "data/history.db")

    # Caller identity (HS256 session tokens)
    jwt_secret: str = get_env("JWT_SECRET")
    jwt_audience: str = get_env("JWT_AUDIENCE", "authenticated")

    # Translation (Google Translate v2)
    translate_api_key: str = get_env("GOOGLE_TRANSLATE_API_KEY")
    translate_base_url: str = get_env("TRANSLATE_BASE_URL", "https://translation.googleapis.com")
    translate_timeout: float = get_env_float("TRANSLATE_TIMEOUT", 30.0)

    # HTTP
    host: str = get_env("HOST", "0.0.0.0")
    port: int = get_env_int("PORT", 8004)
    cors_origins: list[str] = get_env_list("CORS_ORIGINS", ["*"])

    # Logging
    log_level: str = get_env("LOG_LEVEL", "INFO")
    log_format: str = get_env("LOG_FORMAT", "console")


settings = SpeechConfig()

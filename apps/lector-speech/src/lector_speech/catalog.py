"""Static voice, model and language catalogs.

Loaded once at import and exposed read-only. Lookups that miss return a
sentinel instead of failing.
"""

from __future__ import annotations

from types import MappingProxyType

UNKNOWN_VOICE = "Unknown"
CUSTOM_VOICE = "custom"
DEFAULT_MODEL = "eleven_multilingual_v2"

VOICES: MappingProxyType[str, str] = MappingProxyType({
    "nPczCjzI2devNBz1zQrb": "Brian",
    "pFZP5JQG7iQjIQuC4Bku": "Lily",
    "XB0fDUnXU5powFXDhCwa": "Charlotte",
    "SAz9YHcvj6GT2YYXdXww": "River",
    "EXAVITQu4vr4xnSDxMaL": "Sarah",
    "onwK4e9ZLuTAKqWW03F9": "Daniel",
    "TX3LPaxmHKxFdv7VOQHJ": "Liam",
    "XrExE9yKIg1WjnnlVkGX": "Matilda",
    # Hindi voices
    "pMsXgVXv3BLzUgSXRplE": "Premiumhindi",
    "JhdmE8AMBaGSnvtQQQgp": "Hindivoice",
})

MODELS: MappingProxyType[str, str] = MappingProxyType({
    "eleven_multilingual_v2": "Multilingual v2",
    "eleven_turbo_v2_5": "Turbo v2.5",
    "eleven_turbo_v2": "Turbo v2",
})

LANGUAGES: MappingProxyType[str, str] = MappingProxyType({
    "en": "English",
    "hi": "Hindi",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "ja": "Japanese",
    "ko": "Korean",
    "zh": "Chinese",
    "ar": "Arabic",
    "pl": "Polish",
    "ru": "Russian",
    "tr": "Turkish",
    "nl": "Dutch",
    "sv": "Swedish",
    "da": "Danish",
    "no": "Norwegian",
    "fi": "Finnish",
})


def resolve_voice_name(voice_id: str) -> str:
    """Human-readable name for a voice id, ``"Unknown"`` for custom or unlisted ids."""
    return VOICES.get(voice_id, UNKNOWN_VOICE)


def is_supported_language(code: str) -> bool:
    return code in LANGUAGES

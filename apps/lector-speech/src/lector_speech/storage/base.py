"""Abstract audio object store and storage key layout."""

from __future__ import annotations

import secrets
import string
import time
from abc import ABC, abstractmethod

ANONYMOUS_NAMESPACE = "anonymous"

_TOKEN_ALPHABET = string.ascii_lowercase + string.digits
_TOKEN_LENGTH = 7


def random_token(length: int = _TOKEN_LENGTH) -> str:
    return "".join(secrets.choice(_TOKEN_ALPHABET) for _ in range(length))


def build_storage_key(
    caller_id: str | None,
    index: int,
    *,
    now_ms: int | None = None,
    token: str | None = None,
) -> str:
    """Build ``<namespace>/<millis>-<token>-chunk-<index>.mp3``.

    The namespace is the caller id when known, ``anonymous`` otherwise.
    """
    namespace = caller_id or ANONYMOUS_NAMESPACE
    stamp = now_ms if now_ms is not None else time.time_ns() // 1_000_000
    return f"{namespace}/{stamp}-{token or random_token()}-chunk-{index}.mp3"


class AudioStore(ABC):
    """Base class for audio object stores.

    Keys are opaque to callers once returned by ``put``.
    """

    @property
    @abstractmethod
    def name(self) -> str: ...

    async def start(self) -> None:
        """Acquire resources. Call once at startup."""

    async def close(self) -> None:
        """Release resources."""

    @abstractmethod
    async def put(self, key: str, data: bytes, content_type: str = "audio/mpeg") -> str:
        """Persist bytes under ``key`` and return the stored reference.

        Raises StorageError on failure.
        """
        ...

    @abstractmethod
    async def get(self, key: str) -> bytes:
        """Read bytes. Raises NotFoundError for unknown keys, StorageError otherwise."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove an object. Raises StorageError on failure."""
        ...

"""Filesystem-backed audio store for development and single-node deployments."""

from __future__ import annotations

from pathlib import Path, PurePosixPath

from lector_common.logging import get_logger

from ..errors import NotFoundError, StorageError
from .base import AudioStore

log = get_logger(__name__)


class LocalAudioStore(AudioStore):
    """Stores each object as a file under ``root_dir``; keys are relative POSIX paths."""

    def __init__(self, root_dir: str) -> None:
        self._root = Path(root_dir)

    @property
    def name(self) -> str:
        return "local"

    async def start(self) -> None:
        self._root.mkdir(parents=True, exist_ok=True)
        log.info("audio_store_ready", backend=self.name, root=str(self._root))

    def _path_for(self, key: str) -> Path:
        parts = PurePosixPath(key).parts
        if not parts or key.startswith("/") or ".." in parts:
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._root.joinpath(*parts)

    async def put(self, key: str, data: bytes, content_type: str = "audio/mpeg") -> str:
        path = self._path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Failed to store audio file: {e}") from e
        return key

    async def get(self, key: str) -> bytes:
        path = self._path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError as e:
            raise NotFoundError(f"Audio file not found: {key}") from e
        except OSError as e:
            raise StorageError(f"Failed to read audio file: {e}") from e

    async def delete(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise NotFoundError(f"Audio file not found: {key}") from e
        except OSError as e:
            raise StorageError(f"Failed to delete audio file: {e}") from e

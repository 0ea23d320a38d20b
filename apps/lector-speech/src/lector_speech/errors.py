"""Error taxonomy for the speech pipeline.

ValidationError, SynthesisError and StorageError are fatal to a request.
RecordError is raised by the history store but never leaves the pipeline.
"""

from __future__ import annotations

from lector_common.errors import ServiceError


class ValidationError(ServiceError):
    status_code = 400


class SynthesisError(ServiceError):
    """The synthesis backend answered with a non-success status or was unreachable."""

    def __init__(self, message: str, status: int = 502) -> None:
        # Backend 4xx/5xx are passed through; anything else is a bad gateway
        super().__init__(message, status_code=status if status >= 400 else 502)
        self.status = status


class StorageError(ServiceError):
    status_code = 500


class NotFoundError(ServiceError):
    status_code = 404


class RecordError(ServiceError):
    status_code = 500


class TranslationError(ServiceError):
    status_code = 502

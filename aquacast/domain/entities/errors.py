"""
Domain Errors

Error taxonomy of the ingestion and retrain pipeline. Every error carries a
human-readable ``message`` and an optional ``details`` mapping.
"""

from typing import Any, Dict, List, Optional


class DomainError(Exception):
    """Base class for domain errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class DatasetValidationError(DomainError):
    """Raised when an uploaded file is structurally unusable."""

    def __init__(
        self,
        errors: List[str],
        warnings: Optional[List[str]] = None,
    ):
        self.errors = list(errors)
        self.warnings = list(warnings or [])
        message = "; ".join(self.errors) or "Invalid data structure"
        super().__init__(
            message, {"errors": self.errors, "warnings": self.warnings}
        )


class UnsupportedUploadError(DomainError):
    """Raised when the upload's type or size is not accepted."""

    def __init__(
        self,
        message: str,
        too_large: bool = False,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.too_large = too_large
        super().__init__(message, details)


class UploadNotFoundError(DomainError):
    """Raised when an upload identifier is absent from the registry."""

    def __init__(self, upload_id: str, details: Optional[Dict[str, Any]] = None):
        message = f"Upload with ID {upload_id} not found"
        super().__init__(message, details)


class MissingArtifactError(DomainError):
    """Raised when the registry references a stored file that no longer exists."""

    def __init__(
        self, stored_file_name: str, details: Optional[Dict[str, Any]] = None
    ):
        self.stored_file_name = stored_file_name
        message = f"Stored upload file {stored_file_name} not found"
        super().__init__(message, details)


class DatasetIntegrityError(DomainError):
    """Raised when a previously accepted file no longer normalizes."""


class RemoteTimeoutError(DomainError):
    """Raised when the training service does not answer within the budget."""

    def __init__(self, timeout_seconds: float):
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Training timeout after {timeout_seconds:g} seconds",
            {"timeout_seconds": timeout_seconds},
        )


class RemoteTrainingFailedError(DomainError):
    """Raised when the training service answers with an error."""

    def __init__(
        self,
        detail: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.detail = detail
        self.status_code = status_code
        super().__init__(f"Training failed: {detail}", details)


class InvalidTrainingResponseError(RemoteTrainingFailedError):
    """Raised when a successful training response does not match its schema."""


class TrainingServiceUnavailableError(DomainError):
    """Raised when the training service cannot be reached at all."""


class TelemetryExportUnavailableError(DomainError):
    """Raised when the time-series storage cannot produce an export."""


class RetrainInProgressError(DomainError):
    """Raised when a retrain for the same upload is already running."""

    def __init__(self, upload_id: str):
        super().__init__(
            f"Upload {upload_id} already has a retrain in progress",
            {"upload_id": upload_id},
        )


class ForecastStoreError(DomainError):
    """Raised when the forecast artifact cannot be persisted or read."""


class UploadStorageError(DomainError):
    """Raised when raw upload bytes cannot be stored or read."""

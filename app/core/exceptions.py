"""
Domain exceptions raised by the job store, file storage and upload intake.

Each exception carries the HTTP status and the ``error`` kind that the
handlers in ``main.py`` put in the response body, so the API layer never
has to translate them by hand.
"""


class TranslationServiceError(Exception):
    """Base class for all errors surfaced to API callers."""

    status_code = 500
    error_type = "internal_error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class JobValidationError(TranslationServiceError):
    """Input rejected before any side effect took place."""

    status_code = 422
    error_type = "validation_error"


class PayloadDecodeError(JobValidationError):
    """Uploaded file_data is not valid base64."""

    error_type = "invalid_payload"


class StorageError(TranslationServiceError):
    """Underlying persistence or filesystem fault. Never retried."""

    error_type = "storage_error"


class FileStorageError(StorageError):
    """Writing or reading video bytes failed."""

    error_type = "file_storage_error"


class JobStoreError(StorageError):
    """A database operation on translation jobs failed."""

    error_type = "database_error"

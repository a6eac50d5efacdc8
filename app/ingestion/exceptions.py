class IngestionError(Exception):
    """Base exception for upload ingestion errors."""


class UploadValidationError(IngestionError):
    """Raised when an upload is rejected before anything is stored."""


class IngestionRejectedError(IngestionError):
    """Raised when the extraction queue is full and the upload cannot be accepted."""

class PersistenceError(Exception):
    """Base exception for document persistence errors."""


class DocumentNotFoundError(PersistenceError):
    """Raised when a document cannot be found in the database."""


class DuplicateDocumentError(PersistenceError):
    """Raised when a document with the same content hash already exists."""


class InvalidStatusTransitionError(PersistenceError):
    """Raised when a document status change violates the processing lifecycle."""

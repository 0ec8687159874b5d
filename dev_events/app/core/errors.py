"""
Error types shared by the services and the HTTP layer.

Document store failures are translated into a closed set of
exception classes by the adapter in ``core.db``: a field validation
failure, a uniqueness conflict, or a plain ``DocumentStoreError`` for
everything else.  Services and endpoints match on these classes
instead of inspecting driver exceptions.
"""

from typing import Dict, List


class DocumentStoreError(Exception):
    """Unclassified document store failure."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class FieldValidationError(DocumentStoreError):
    """A document was rejected because one or more fields are invalid.

    ``errors`` holds ``{"field": ..., "message": ...}`` entries, one per
    offending field.
    """

    def __init__(self, errors: List[Dict[str, str]]) -> None:
        super().__init__("Validation Failed")
        self.errors = errors


class UniquenessConflictError(DocumentStoreError):
    """A document collided with a unique index.

    ``duplicates`` holds ``{"field": ..., "value": ..., "message": ...}``
    entries for the conflicting keys.
    """

    def __init__(self, duplicates: List[Dict[str, str]]) -> None:
        super().__init__("Duplicate Key Error")
        self.duplicates = duplicates


class StoreConfigurationError(DocumentStoreError):
    """The document store is not configured (e.g. ``DATABASE_URL`` unset)."""


class StoreConnectionError(DocumentStoreError):
    """The document store could not be reached or opened."""


class BlobStoreError(Exception):
    """Failure talking to the blob store."""


class UploadFailedError(BlobStoreError):
    """The image could not be uploaded."""


class MissingImageError(ValueError):
    """An event creation request carried no image payload."""

    def __init__(self) -> None:
        super().__init__("Image file is required")


class InvalidFormDataError(ValueError):
    """The submitted form could not be parsed."""

    def __init__(self) -> None:
        super().__init__("Invalid Form Data")


class EventNotFoundError(LookupError):
    """No event exists for the requested slug."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"No event found for slug '{slug}'.")
        self.slug = slug

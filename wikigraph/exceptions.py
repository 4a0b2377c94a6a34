"""Custom exceptions for wiki graph building and querying."""
from typing import Optional


class WikiGraphError(Exception):
    """Base exception for wiki graph operations."""
    pass


class NotFoundError(WikiGraphError):
    """Raised when a page id has no loaded content."""
    def __init__(self, page_id: str):
        self.page_id = page_id
        super().__init__(f"Page '{page_id}' not found")


class GraphIntegrityError(WikiGraphError):
    """Raised on structural inconsistencies such as parent-chain cycles."""
    pass


class DocumentProcessingError(WikiGraphError):
    """Raised when a single document fails to parse or preprocess."""
    def __init__(self, page_id: Optional[str], cause: BaseException):
        self.page_id = page_id
        self.cause = cause
        super().__init__(f"Cannot process page '{page_id}': {cause}")


class BundleUnavailableError(WikiGraphError):
    """Raised when the example source bundle cannot be located or read."""
    pass


class IncludeNotFoundError(BundleUnavailableError):
    """Raised when no bundle entry matches an included path."""
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Bundle entry was not found: {path}")

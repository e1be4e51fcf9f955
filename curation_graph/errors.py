"""
Curation errors

Taxonomy surfaced to callers (API layer, scripts):
- ValidationError: malformed input, raised before the store is touched
- NotFoundError: a referenced Client/Report/Entity/Source/Quote is absent
- ReferentialError: a Quote references an Entity/Source outside its Report
- StoreError: driver or transaction failure (already rolled back, safe to retry)

Deleting an absent node is never an error.
"""
from typing import Optional


class CurationError(Exception):
    """Base class for all curation graph errors."""
    pass


class ValidationError(CurationError):
    """Raised when input fails validation."""

    def __init__(self, field: Optional[str], message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}" if field else message)


class NotFoundError(CurationError):
    """Raised when a referenced node does not exist."""

    def __init__(self, kind: str, node_id: Optional[str] = None, message: Optional[str] = None):
        self.kind = kind
        self.node_id = node_id
        super().__init__(message or f"{kind} not found" + (f": {node_id}" if node_id else ""))


class ReferentialError(CurationError):
    """Raised when a Quote references an Entity/Source not reachable from its Report."""

    def __init__(self, reference: str, node_id: Optional[str] = None):
        self.reference = reference
        self.node_id = node_id
        super().__init__(f"{reference} not found" + (f": {node_id}" if node_id else ""))


class StoreError(CurationError):
    """Raised when the graph store fails; the transaction has been rolled back."""
    pass

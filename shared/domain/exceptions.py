"""
Domain Error Taxonomy

Every failure a use case reports falls into one of these kinds so callers
can tell them apart without parsing messages:

- NotFoundError: the referenced record does not exist
- ForbiddenError: the caller may not perform the operation
- InvalidInputError: malformed or illogical input, or a forbidden state change
- ConflictError: the change would break a uniqueness or overlap invariant
- TransientStoreError: the record store was unavailable; retrying is safe
"""

from typing import Dict, List, Optional


class DomainError(Exception):
    """Base class for errors raised by domain and application code"""

    default_message = 'Domain error'

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(DomainError):
    default_message = 'Record not found'


class ForbiddenError(DomainError):
    default_message = 'Not authorized to perform this operation'


class InvalidInputError(DomainError):
    """
    Invalid input

    `errors` maps field names to every message collected for that field,
    so a caller learns about all bad fields at once.
    """

    default_message = 'Invalid input'

    def __init__(self, message: Optional[str] = None, errors: Optional[Dict[str, List[str]]] = None):
        super().__init__(message)
        self.errors = errors or {}


class ConflictError(DomainError):
    default_message = 'Conflicts with an existing record'


class TransientStoreError(DomainError):
    default_message = 'Record store is temporarily unavailable'

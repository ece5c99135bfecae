"""
Custom Exceptions

This module defines the error taxonomy of the link tracker.

Propagation:
- DuplicateIdentifierError is recovered inside LinkService.create by retrying
- Every other error propagates to the API layer, which maps it to a status code
"""


class LinkTrackerException(Exception):
    """Base exception for link tracker service."""
    pass


class InvalidInputError(LinkTrackerException):
    """Raised when a create request carries a malformed or non-positive expiry."""
    
    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field} {reason}")


class LinkNotFoundError(LinkTrackerException):
    """Raised when a link id is not present in the store."""
    
    def __init__(self, link_id: str):
        self.link_id = link_id
        super().__init__(f"Link '{link_id}' not found")


class LinkExpiredError(LinkTrackerException):
    """Raised when a click targets a link whose expiry has passed."""
    
    def __init__(self, link_id: str):
        self.link_id = link_id
        super().__init__(f"Link '{link_id}' has expired")


class DuplicateIdentifierError(LinkTrackerException):
    """Raised by a store when inserting an id that already exists."""
    
    def __init__(self, link_id: str):
        self.link_id = link_id
        super().__init__(f"Link id '{link_id}' already exists")


class IdentifierExhaustedError(LinkTrackerException):
    """Raised when every generated id collided with an existing one."""
    
    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Could not allocate a unique link id after {attempts} attempts")


class BackendUnavailableError(LinkTrackerException):
    """Raised when storage operations fail."""
    
    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Storage error: {message}")

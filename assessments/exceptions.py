"""Error taxonomy for assessment and course operations.

These exceptions carry a human-readable message and are raised at the
boundary (bad input, missing data, authorisation, storage failure). The
API layer maps them to HTTP responses in `api.exceptions`.
"""
from __future__ import annotations


class ClasswiseError(Exception):
    """Base class for domain errors."""

    default_message = "Request failed."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ClasswiseError):
    """Malformed or missing input; never retried."""

    default_message = "Invalid input."


class NotFoundError(ClasswiseError):
    """Referenced object does not exist (or an assessment has no questions)."""

    default_message = "Not found."


class AuthorizationError(ClasswiseError):
    """Caller is not the owning teacher or not an actively enrolled student."""

    default_message = "Not permitted."


class PersistenceError(ClasswiseError):
    """The database rejected a read or write."""

    default_message = "Could not save your submission. Please try again."

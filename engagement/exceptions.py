"""Error taxonomy for the engagement engine."""

from __future__ import annotations


class EngagementError(Exception):
    """Base class for all engine errors."""


class ValidationError(EngagementError):
    """Input rejected before any storage access (e.g. a phone with no digits)."""


class NotFoundError(EngagementError):
    """The operation requires a record that does not exist."""


class ExternalServiceError(EngagementError):
    """The LLM provider failed, errored or timed out. Recovered by the analyzer."""


class ParseError(EngagementError):
    """The LLM response was not a usable JSON assessment. Recovered by the analyzer."""


class PersistenceError(EngagementError):
    """A storage write failed. Propagated to the caller; never retried."""

from __future__ import annotations


class MatchError(Exception):
    """Base class for match engine errors."""


class NotFoundError(MatchError):
    """The anchor influencer or campaign does not exist in the data store."""

    def __init__(self, kind: str, entity_id: str):
        super().__init__(f"{kind} not found: {entity_id}")
        self.kind = kind
        self.entity_id = entity_id


class TransientFetchError(MatchError):
    """A data-store read failed (network error, query error)."""

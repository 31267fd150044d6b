"""Exception hierarchy for shinglesearch."""
from __future__ import annotations

from typing import Optional


class ShingleSearchError(Exception):
    """Base class for every error raised by the library."""


class ConfigError(ShingleSearchError, ValueError):
    """Invalid configuration; raised before any corpus work starts."""


class DocumentTooShortError(ShingleSearchError, ValueError):
    """A document cannot be shingled or cannot fill a single band.

    ``doc_id`` is *None* for ad-hoc query text. ``length`` is the observed
    character or distinct-shingle count and ``required`` the minimum needed.
    """

    def __init__(
        self,
        message: str,
        *,
        doc_id: Optional[int] = None,
        length: int = 0,
        required: int = 0,
    ) -> None:
        super().__init__(message)
        self.doc_id = doc_id
        self.length = length
        self.required = required

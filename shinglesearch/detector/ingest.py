"""Character-shingle extraction.

A document of length ``L`` yields the ``L - S + 1`` overlapping substrings of
width ``S``. Only their 64-bit hashes are kept; duplicate shingles collapse
into one set element.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, List, Optional, Set

from .errors import DocumentTooShortError
from .minhash import batch_xxhash64


def char_ngrams(text: str, n: int) -> Iterator[str]:
    """Yield every contiguous *n*-character substring of *text*."""
    for i in range(len(text) - n + 1):
        yield text[i : i + n]  # noqa: E203 (black formatting)


def shingle_hashes(
    text: str,
    size: int,
    *,
    seed: int = 0,
    doc_id: Optional[int] = None,
) -> Set[int]:
    """Return the set of hashed *size*-character shingles of *text*.

    Raises :class:`DocumentTooShortError` when ``len(text) < size``.
    """
    if text is None or not isinstance(text, str):
        raise TypeError(f"document text must be str, got {type(text).__name__}")
    if len(text) < size:
        where = "query" if doc_id is None else f"document {doc_id}"
        raise DocumentTooShortError(
            f"{where} has {len(text)} characters, shingle size is {size}",
            doc_id=doc_id,
            length=len(text),
            required=size,
        )
    return set(batch_xxhash64(char_ngrams(text, size), seed=seed))


def read_corpus(path: os.PathLike | str) -> List[str]:
    """Read one document per line; ids are 0-based line numbers.

    Blank lines are kept so that ids stay aligned with the file (they are
    skipped at index time for being too short).
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)
    with path.open("r", encoding="utf-8", errors="replace") as f:
        return [line.rstrip("\r\n") for line in f]

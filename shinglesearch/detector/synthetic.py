"""Synthetic corpora with planted near-duplicates, for demos and tests."""
from __future__ import annotations

import random
import string
from typing import List, Optional, Tuple

CHARSET = string.ascii_uppercase
DOCUMENT_LEN = 100
CHANGE_SIZE = 5

MUTATIONS = ("insert", "delete", "replace")


def random_document(rng: random.Random, length: int = DOCUMENT_LEN, charset: str = CHARSET) -> str:
    return "".join(rng.choice(charset) for _ in range(length))


def mutate_document(
    rng: random.Random,
    text: str,
    op: Optional[str] = None,
    change_size: int = CHANGE_SIZE,
    charset: str = CHARSET,
) -> str:
    """Insert, delete or replace a run of ``change_size + 1`` characters.

    The run starts at a random offset at least *change_size* characters away
    from both ends. *op* is drawn from :data:`MUTATIONS` when not given.
    """
    if op is None:
        op = rng.choice(MUTATIONS)
    if op not in MUTATIONS:
        raise ValueError(f"unknown mutation {op!r}")
    if len(text) < 3 * change_size + 2:
        raise ValueError(f"text of length {len(text)} is too short to mutate")

    start = rng.randrange(change_size, len(text) - change_size - 1)
    run = change_size + 1
    fresh = "".join(rng.choice(charset) for _ in range(run))
    if op == "insert":
        return text[:start] + fresh + text[start:]
    if op == "delete":
        return text[:start] + text[start + run :]  # noqa: E203
    return text[:start] + fresh + text[start + run :]  # noqa: E203


def make_corpus(
    n_documents: int,
    n_duplicates: int,
    *,
    length: int = DOCUMENT_LEN,
    seed: int = 0,
) -> Tuple[List[str], List[Tuple[int, int]]]:
    """Random corpus where *n_duplicates* documents are mutations of earlier ones.

    Returns ``(documents, planted_pairs)``; each pair is
    ``(original_id, mutated_id)``.
    """
    if n_duplicates < 0 or (n_duplicates and n_duplicates >= n_documents):
        raise ValueError("need at least one original document per corpus")
    rng = random.Random(seed)
    n_originals = n_documents - n_duplicates
    documents = [random_document(rng, length) for _ in range(n_originals)]
    pairs: List[Tuple[int, int]] = []
    for _ in range(n_duplicates):
        source = rng.randrange(n_originals)
        pairs.append((source, len(documents)))
        documents.append(mutate_document(rng, documents[source]))
    return documents, pairs

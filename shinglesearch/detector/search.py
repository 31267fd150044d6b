"""Candidate retrieval and exact-Jaccard reranking.

A query is sketched exactly like a corpus document. Every document that shares
a bucket with it in any band slot becomes a candidate; candidates are then
scored by exact Jaccard similarity of the full shingle-hash sets. Recall is
bounded by the banding, the ranking of what is retrieved is exact.
"""
from __future__ import annotations

import logging
from functools import partial
from typing import AbstractSet, List, NamedTuple, Optional, Sequence, Set, Tuple

from .ingest import shingle_hashes
from .lsh_index import DocumentSketch, LSHIndex, sketch_document
from .parallel import parallel_map

logger = logging.getLogger(__name__)


class SearchResult(NamedTuple):
    doc_id: int
    similarity: float


# -----------------------------------------------------------
# Helpers
# -----------------------------------------------------------


def jaccard(a: AbstractSet[int], b: AbstractSet[int]) -> float:
    """``|a & b| / |a | b|``; two empty sets score ``0.0``."""
    union = len(a | b)
    if union == 0:
        return 0.0
    return len(a & b) / union


def _score_candidate(
    query_shingles: AbstractSet[int],
    shingle_size: int,
    seed: int,
    item: Tuple[int, str],
) -> SearchResult:
    doc_id, text = item
    return SearchResult(doc_id, jaccard(query_shingles, shingle_hashes(text, shingle_size, seed=seed)))


def _check_corpus(index: LSHIndex, documents: Sequence[str]) -> None:
    if len(documents) != index.num_documents:
        raise ValueError(
            f"index was built from {index.num_documents} documents, got {len(documents)}"
        )


def _select_candidates(index: LSHIndex, sketch: DocumentSketch) -> List[int]:
    """Candidate ids in ascending order, capped at ``max_candidates`` if set."""
    cap = index.config.max_candidates
    if cap is None:
        return sorted(index.candidates(sketch.band_keys))
    hits = index.candidate_hits(sketch.band_keys)
    # Keep the documents colliding in the most band slots.
    kept = sorted(hits, key=lambda doc_id: (-hits[doc_id], doc_id))[:cap]
    if len(hits) > cap:
        logger.debug("Capped candidate set from %d to %d", len(hits), cap)
    return sorted(kept)


def _rank(
    index: LSHIndex,
    documents: Sequence[str],
    sketch: DocumentSketch,
    top_n: int,
    workers: Optional[int],
) -> List[SearchResult]:
    candidate_ids = _select_candidates(index, sketch)
    logger.debug("Query matched %d candidates", len(candidate_ids))
    if not candidate_ids or top_n == 0:
        return []

    cfg = index.config
    scored = parallel_map(
        partial(_score_candidate, sketch.shingles, cfg.shingle_size, cfg.seed),
        [(doc_id, documents[doc_id]) for doc_id in candidate_ids],
        workers=workers,
    )
    scored.sort(key=lambda r: (-r.similarity, r.doc_id))
    return scored[:top_n]


def _resolve_top_n(index: LSHIndex, top_n: Optional[int]) -> int:
    limit = index.config.top_n if top_n is None else top_n
    if limit < 0:
        raise ValueError(f"top_n must be non-negative, got {limit}")
    return limit


# -----------------------------------------------------------
# Queries
# -----------------------------------------------------------


def query_candidates(index: LSHIndex, query_text: str) -> Set[int]:
    """Ids sharing at least one bucket with *query_text* (before any cap)."""
    return index.candidates(sketch_document(query_text, index.config).band_keys)


def search(
    index: LSHIndex,
    documents: Sequence[str],
    query_text: str,
    top_n: Optional[int] = None,
    *,
    workers: Optional[int] = None,
) -> List[SearchResult]:
    """Return up to *top_n* ``(doc_id, similarity)`` pairs for *query_text*.

    Results are ordered by similarity (descending) then id (ascending) and are
    never padded. *documents* must be the sequence the index was built from.
    Raises :class:`DocumentTooShortError` when the query cannot be sketched.
    """
    _check_corpus(index, documents)
    limit = _resolve_top_n(index, top_n)
    sketch = sketch_document(query_text, index.config)
    return _rank(index, documents, sketch, limit, workers)


def search_by_id(
    index: LSHIndex,
    documents: Sequence[str],
    doc_id: int,
    top_n: Optional[int] = None,
    *,
    workers: Optional[int] = None,
) -> List[SearchResult]:
    """Like :func:`search`, using corpus document *doc_id* as the query."""
    _check_corpus(index, documents)
    if not 0 <= doc_id < len(documents):
        raise IndexError(f"doc_id {doc_id} out of range for corpus of {len(documents)}")
    limit = _resolve_top_n(index, top_n)
    sketch = sketch_document(documents[doc_id], index.config, doc_id=doc_id)
    return _rank(index, documents, sketch, limit, workers)

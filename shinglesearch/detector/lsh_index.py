"""Banded LSH index over bottom-K MinHash signatures.

Every band slot owns an independent table mapping bucket key to the ids of the
documents whose band hashed to it. The index is built once from a corpus and
is read-only afterwards.
"""
from __future__ import annotations

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass
from functools import partial
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple, Union

import numpy as np

from .bands import banded_signature
from .config import LSHConfig
from .errors import DocumentTooShortError
from .ingest import shingle_hashes
from .minhash import compute_signature
from .parallel import parallel_map

logger = logging.getLogger(__name__)

BandKeys = List[Tuple[int, int]]


@dataclass(frozen=True)
class DocumentSketch:
    """Everything derived from one document's text."""

    shingles: Set[int]
    signature: np.ndarray
    band_keys: BandKeys


def sketch_document(text: str, config: LSHConfig, doc_id: Optional[int] = None) -> DocumentSketch:
    """Shingle, sign and band *text* with *config*.

    Raises :class:`DocumentTooShortError` when the text is shorter than the
    shingle size or has fewer distinct shingles than the band width. A
    signature shorter than ``signature_length`` still contributes the full
    bands it covers.
    """
    shingles = shingle_hashes(text, config.shingle_size, seed=config.seed, doc_id=doc_id)
    if len(shingles) < config.band_width:
        where = "query" if doc_id is None else f"document {doc_id}"
        raise DocumentTooShortError(
            f"{where} has {len(shingles)} distinct shingles, band width is {config.band_width}",
            doc_id=doc_id,
            length=len(shingles),
            required=config.band_width,
        )
    signature = compute_signature(shingles, config.signature_length)
    return DocumentSketch(shingles, signature, banded_signature(signature, config.band_width, config.seed))


def _sketch_bands(
    config: LSHConfig, item: Tuple[int, str]
) -> Tuple[int, Optional[BandKeys], Optional[DocumentTooShortError]]:
    """Worker: band keys for one corpus document, or the reason it was skipped."""
    doc_id, text = item
    try:
        return doc_id, sketch_document(text, config, doc_id=doc_id).band_keys, None
    except DocumentTooShortError as e:
        return doc_id, None, e


class LSHIndex:
    """Read-only bucket tables, one per band slot."""

    def __init__(
        self,
        config: LSHConfig,
        tables: Sequence[Mapping[int, Tuple[int, ...]]],
        num_documents: int,
        skipped: Iterable[int] = (),
    ) -> None:
        if len(tables) != config.num_bands:
            raise ValueError(f"expected {config.num_bands} band tables, got {len(tables)}")
        self.config = config
        self._tables: Tuple[Mapping[int, Tuple[int, ...]], ...] = tuple(tables)
        self.num_documents = num_documents
        self.skipped: Tuple[int, ...] = tuple(sorted(skipped))

    # --------------------------------------------------
    # Lookups
    # --------------------------------------------------

    @property
    def num_bands(self) -> int:
        return len(self._tables)

    def __len__(self) -> int:
        """Number of indexed (non-skipped) documents."""
        return self.num_documents - len(self.skipped)

    def bucket(self, slot: int, key: int) -> Tuple[int, ...]:
        """Ids stored under *key* in band slot *slot* (empty when absent)."""
        return self._tables[slot].get(key, ())

    def candidates(self, band_keys: Iterable[Tuple[int, int]]) -> Set[int]:
        """Union of the buckets addressed by *band_keys*."""
        found: Set[int] = set()
        for slot, key in band_keys:
            found.update(self.bucket(slot, key))
        return found

    def candidate_hits(self, band_keys: Iterable[Tuple[int, int]]) -> Counter:
        """Number of band slots in which each candidate collides with *band_keys*."""
        hits: Counter = Counter()
        for slot, key in band_keys:
            hits.update(self.bucket(slot, key))
        return hits

    def stats(self) -> Dict[str, Any]:
        bucket_sizes = [len(ids) for table in self._tables for ids in table.values()]
        return {
            "documents": self.num_documents,
            "indexed": len(self),
            "skipped": len(self.skipped),
            "band_slots": self.num_bands,
            "buckets": len(bucket_sizes),
            "largest_bucket": max(bucket_sizes, default=0),
        }

    def __repr__(self) -> str:  # pragma: no cover – debugging aid
        return (
            f"LSHIndex(documents={self.num_documents}, skipped={len(self.skipped)}, "
            f"band_slots={self.num_bands})"
        )


# -----------------------------------------------------------
# Build
# -----------------------------------------------------------


def build_index(
    documents: Sequence[str],
    config: Union[LSHConfig, Mapping[str, Any], None] = None,
    *,
    workers: Optional[int] = None,
    progress: bool = False,
) -> Tuple[LSHIndex, List[int]]:
    """Index *documents* (ids are their positions) and return ``(index, skipped_doc_ids)``.

    Sketching runs in a process pool when *workers* > 1; the results are then
    folded into the band tables by this process alone. Documents too short to
    fill one band are left out and reported in ``skipped_doc_ids``.
    """
    if not isinstance(config, LSHConfig):
        config = LSHConfig.from_mapping(config)
    if not isinstance(documents, Sequence):
        documents = list(documents)

    sketches = parallel_map(
        partial(_sketch_bands, config),
        list(enumerate(documents)),
        workers=workers,
        desc="Sketching documents" if progress else None,
    )

    tables: List[Dict[int, List[int]]] = [defaultdict(list) for _ in range(config.num_bands)]
    skipped: List[int] = []
    for doc_id, keys, error in sketches:
        if error is not None:
            logger.debug("Skipping %s", error)
            skipped.append(doc_id)
            continue
        for slot, key in keys:
            tables[slot][key].append(doc_id)

    index = LSHIndex(
        config,
        [{key: tuple(ids) for key, ids in table.items()} for table in tables],
        num_documents=len(documents),
        skipped=skipped,
    )
    stats = index.stats()
    logger.info(
        "Indexed %d of %d documents (%d skipped) into %d buckets over %d band slots",
        stats["indexed"],
        stats["documents"],
        stats["skipped"],
        stats["buckets"],
        stats["band_slots"],
    )
    return index, skipped

"""Parallel vs single-process equivalence tests for index build and search."""
from __future__ import annotations

import pytest

from shinglesearch.detector.config import LSHConfig
from shinglesearch.detector.lsh_index import build_index, sketch_document
from shinglesearch.detector.parallel import parallel_map, resolve_workers
from shinglesearch.detector.search import search, search_by_id
from shinglesearch.detector.synthetic import make_corpus


def test_parallel_map_preserves_order() -> None:
    items = [(-1) ** i * i for i in range(50)]
    assert parallel_map(abs, items, workers=2, chunksize=7) == list(range(50))


def test_resolve_workers() -> None:
    assert resolve_workers(None) == 1
    assert resolve_workers(3) == 3
    assert resolve_workers(0) >= 1


@pytest.mark.parametrize("workers", [1, 2])
def test_parallel_equivalence(workers: int) -> None:
    """Build and query with *workers* and compare to the serial baseline."""

    # Synthetic corpus with planted near-duplicates and a few unusable docs.
    docs, pairs = make_corpus(150, 25, seed=42)
    docs = docs + ["", "AB", "ZZZZZZZZ"]
    cfg = LSHConfig(signature_length=40, band_width=2)

    baseline, skipped_single = build_index(docs, cfg)
    index, skipped = build_index(docs, cfg, workers=workers)

    assert skipped == skipped_single == [150, 151, 152]
    assert index.stats() == baseline.stats()

    for doc_id in range(0, 150, 7):
        for slot, key in sketch_document(docs[doc_id], cfg).band_keys:
            assert index.bucket(slot, key) == baseline.bucket(slot, key)

    for original, mutated in pairs:
        assert search_by_id(index, docs, original, workers=workers) == search_by_id(
            baseline, docs, original
        )
        assert search(index, docs, docs[mutated], workers=workers) == search(
            baseline, docs, docs[mutated]
        )

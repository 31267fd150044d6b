"""xxHash and bottom-K MinHash utilities for shinglesearch."""
from __future__ import annotations

import heapq
from typing import Iterable, List

import numpy as np
import xxhash

# Signatures are stored as little-endian unsigned 64-bit so that band bytes
# (and therefore bucket keys) are identical on every platform.
SIGNATURE_DTYPE = np.dtype("<u8")

# -----------------------------------------------------------
# xxHash helpers
# -----------------------------------------------------------


def hash_xx64(value: str, seed: int = 0) -> int:
    """Stable unsigned 64-bit hash of *value* (UTF-8 encoded, lone surrogates kept)."""
    return xxhash.xxh64_intdigest(value.encode("utf-8", "surrogatepass"), seed=seed)


def batch_xxhash64(strings: Iterable[str], seed: int = 0) -> List[int]:
    """64-bit hashes for every string in *strings*, in order."""
    digest = xxhash.xxh64_intdigest
    return [digest(s.encode("utf-8", "surrogatepass"), seed=seed) for s in strings]


# -----------------------------------------------------------
# MinHash helpers
# -----------------------------------------------------------


def compute_signature(hashes: Iterable[int], k: int) -> np.ndarray:
    """Return the *k* smallest values of *hashes* in ascending order.

    Selection runs through :func:`heapq.nsmallest`, which keeps a max-heap
    capped at *k* entries, so memory stays O(k) whatever the input size.
    Inputs are expected to be distinct (a shingle-hash *set*). When fewer
    than *k* values are supplied all of them are returned; the signature is
    never padded.
    """
    if k <= 0:
        raise ValueError(f"k must be positive, got {k}")
    smallest = heapq.nsmallest(k, hashes)
    return np.asarray(smallest, dtype=SIGNATURE_DTYPE)


def signature_overlap(a: np.ndarray, b: np.ndarray) -> float:
    """Fraction of shared values between two signatures (cheap Jaccard estimate)."""
    if a.size == 0 and b.size == 0:
        return 0.0
    shared = np.intersect1d(a, b, assume_unique=True).size
    return shared / max(a.size, b.size)

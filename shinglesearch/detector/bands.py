"""Split a MinHash signature into bands and hash each band to a bucket key."""
from __future__ import annotations

from typing import Iterator, List, Tuple

import numpy as np
import xxhash

from .minhash import SIGNATURE_DTYPE


def num_full_bands(signature_len: int, width: int) -> int:
    return signature_len // width


def band_keys(signature: np.ndarray, width: int, seed: int = 0) -> Iterator[Tuple[int, int]]:
    """Yield ``(band_slot, bucket_key)`` for every full band of *signature*.

    Band ``i`` is ``signature[i*width:(i+1)*width]``. Its values are hashed as
    one ordered byte sequence, so the same values in another order give a
    different key. A trailing partial band (short signature) is dropped.
    ``signature_length % width`` is checked by :class:`LSHConfig`, not here.
    """
    values = np.ascontiguousarray(signature, dtype=SIGNATURE_DTYPE)
    for slot in range(num_full_bands(values.size, width)):
        band = values[slot * width : (slot + 1) * width]  # noqa: E203
        yield slot, xxhash.xxh64_intdigest(band.tobytes(), seed=seed)


def banded_signature(signature: np.ndarray, width: int, seed: int = 0) -> List[Tuple[int, int]]:
    """List form of :func:`band_keys`."""
    return list(band_keys(signature, width, seed))

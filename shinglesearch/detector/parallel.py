"""Process-pool map used for the embarrassingly parallel build and scoring steps."""
from __future__ import annotations

import os
from concurrent.futures import ProcessPoolExecutor
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

from tqdm import tqdm

T = TypeVar("T")
R = TypeVar("R")


def resolve_workers(workers: Optional[int]) -> int:
    """``None``/``1`` mean serial, ``0`` or negative means one per CPU."""
    if workers is None:
        return 1
    if workers <= 0:
        return os.cpu_count() or 1
    return workers


def parallel_map(
    fn: Callable[[T], R],
    items: Sequence[T],
    *,
    workers: Optional[int] = None,
    chunksize: int = 64,
    desc: Optional[str] = None,
) -> List[R]:
    """Apply *fn* to every item and return the results in input order.

    *fn* must be picklable (a module-level function or a ``functools.partial``
    of one) when more than one worker is used. A progress bar is shown when
    *desc* is given.
    """
    n_workers = resolve_workers(workers)
    if n_workers == 1 or len(items) < 2:
        return list(_progress(map(fn, items), len(items), desc))

    with ProcessPoolExecutor(max_workers=n_workers) as executor:
        results = executor.map(fn, items, chunksize=max(1, chunksize))
        return list(_progress(results, len(items), desc))


def _progress(results: Iterable[R], total: int, desc: Optional[str]) -> Iterable[R]:
    if desc is None:
        return results
    return tqdm(results, total=total, desc=desc, unit="doc")

"""shinglesearch detector package.

Core public API lives here so external users can::

    from shinglesearch.detector import LSHConfig, build_index, search

    index, skipped = build_index(documents, LSHConfig(shingle_size=3))
    hits = search(index, documents, "some query text", top_n=5)
"""

from importlib.metadata import PackageNotFoundError, version as _pkg_version

# Semantic version of the installed package
try:
    __version__: str = _pkg_version("shinglesearch")
except PackageNotFoundError:  # pragma: no cover – local dev path
    __version__ = "0.1.0"

from .config import LSHConfig, load_config
from .errors import ConfigError, DocumentTooShortError, ShingleSearchError
from .ingest import char_ngrams, shingle_hashes
from .minhash import batch_xxhash64, compute_signature
from .bands import band_keys
from .lsh_index import DocumentSketch, LSHIndex, build_index, sketch_document
from .search import SearchResult, jaccard, query_candidates, search, search_by_id

__all__ = [
    "__version__",
    "LSHConfig",
    "load_config",
    "ConfigError",
    "DocumentTooShortError",
    "ShingleSearchError",
    "char_ngrams",
    "shingle_hashes",
    "batch_xxhash64",
    "compute_signature",
    "band_keys",
    "DocumentSketch",
    "LSHIndex",
    "build_index",
    "sketch_document",
    "SearchResult",
    "jaccard",
    "query_candidates",
    "search",
    "search_by_id",
]

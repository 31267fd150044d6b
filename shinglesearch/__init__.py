"""shinglesearch - near-duplicate text retrieval with MinHash + LSH banding.

Documents are cut into overlapping character shingles, sketched into bottom-K
MinHash signatures and indexed band by band. Queries gather every document
sharing a bucket with them and rerank those candidates by exact Jaccard
similarity.

Quick Start:
    # CLI usage
    shinglesearch search corpus.txt --query "some text" --top-n 5

    # Python API
    from shinglesearch import LSHConfig, build_index, search
    index, skipped = build_index(docs, LSHConfig(signature_length=100))
    results = search(index, docs, "some text")
"""

from .detector import __version__

# Re-export main API
from .detector import (
    LSHConfig,
    load_config,
    ConfigError,
    DocumentTooShortError,
    ShingleSearchError,
    LSHIndex,
    build_index,
    SearchResult,
    search,
    search_by_id,
    query_candidates,
    jaccard,
)

__all__ = [
    "__version__",
    "LSHConfig",
    "load_config",
    "ConfigError",
    "DocumentTooShortError",
    "ShingleSearchError",
    "LSHIndex",
    "build_index",
    "SearchResult",
    "search",
    "search_by_id",
    "query_candidates",
    "jaccard",
]

"""shinglesearch command-line interface.

Usage
-----
$ shinglesearch search corpus.txt --query "ABCDEFGHIJ" --top-n 5
$ shinglesearch search corpus.txt --doc-id 12 --config lsh.yml --json
$ shinglesearch stats corpus.txt --signature-length 100
$ shinglesearch demo --documents 2000 --duplicates 100

The *search* command indexes a corpus file (one document per line, ids are
0-based line numbers) and prints the nearest neighbours of a query text or of
a corpus document.

The *stats* command indexes a corpus and prints bucket statistics.

The *demo* command builds a random corpus with planted near-duplicates and
reports how many of the planted pairs the index retrieves.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

from .detector import __version__
from .detector.config import LSHConfig, load_config
from .detector.errors import ShingleSearchError
from .detector.ingest import read_corpus
from .detector.lsh_index import build_index, sketch_document
from .detector.minhash import signature_overlap
from .detector.search import search, search_by_id
from .detector.synthetic import make_corpus

# -----------------------------------------------------------
# Helpers
# -----------------------------------------------------------


def _config_from_args(args: argparse.Namespace) -> LSHConfig:
    """YAML file (if any) first, then explicit command-line overrides."""
    cfg = load_config(args.config) if args.config else LSHConfig()
    return cfg.with_overrides(
        shingle_size=args.shingle_size,
        signature_length=args.signature_length,
        band_width=args.band_width,
        top_n=args.top_n,
        seed=args.seed,
        max_candidates=args.max_candidates,
    )


def _print_skipped(skipped: List[int]) -> None:
    if skipped:
        preview = ", ".join(str(i) for i in skipped[:10])
        more = f" (+{len(skipped) - 10} more)" if len(skipped) > 10 else ""
        print(f"Skipped {len(skipped)} short documents: {preview}{more}", file=sys.stderr)


# -----------------------------------------------------------
# Commands
# -----------------------------------------------------------


def _cmd_search(args: argparse.Namespace) -> None:
    cfg = _config_from_args(args)
    documents = read_corpus(args.corpus)
    index, skipped = build_index(documents, cfg, workers=args.workers, progress=not args.quiet)
    if not args.quiet:
        _print_skipped(skipped)

    if args.doc_id is not None:
        results = search_by_id(index, documents, args.doc_id, workers=args.workers)
    else:
        results = search(index, documents, args.query, workers=args.workers)

    if args.json:
        json.dump([r._asdict() for r in results], sys.stdout, indent=2)
        sys.stdout.write("\n")
        return

    if not results:
        print("No candidates found.")
        return
    for rank, (doc_id, similarity) in enumerate(results, 1):
        text = documents[doc_id]
        preview = text if len(text) <= 60 else text[:57] + "..."
        print(f"{rank:>3}. doc {doc_id:<8} {similarity:.4f}  {preview}")


def _cmd_stats(args: argparse.Namespace) -> None:
    cfg = _config_from_args(args)
    documents = read_corpus(args.corpus)
    index, skipped = build_index(documents, cfg, workers=args.workers, progress=not args.quiet)
    stats = index.stats()
    stats["config"] = cfg.to_dict()
    stats["skipped_doc_ids"] = skipped
    json.dump(stats, sys.stdout, indent=2)
    sys.stdout.write("\n")


def _cmd_demo(args: argparse.Namespace) -> None:
    """Recall of planted near-duplicate pairs on a synthetic corpus."""
    cfg = _config_from_args(args)
    documents, pairs = make_corpus(
        args.documents, args.duplicates, length=args.length, seed=args.corpus_seed
    )
    index, skipped = build_index(documents, cfg, workers=args.workers, progress=not args.quiet)
    _print_skipped(skipped)

    found = 0
    overlaps = []
    for original, mutated in pairs:
        top_n = max(cfg.top_n, 1)
        hits = {r.doc_id for r in search_by_id(index, documents, original, top_n)}
        found += mutated in hits
        overlaps.append(
            signature_overlap(
                sketch_document(documents[original], cfg).signature,
                sketch_document(documents[mutated], cfg).signature,
            )
        )

    stats = index.stats()
    print(f"Corpus: {len(documents):,} documents, {len(pairs):,} planted near-duplicates")
    print(f"Index : {stats['buckets']:,} buckets over {stats['band_slots']} band slots "
          f"(largest bucket {stats['largest_bucket']})")
    if pairs:
        print(f"Recall: {found}/{len(pairs)} ({found / len(pairs):.1%}) in top {max(cfg.top_n, 1)}")
        print(f"Mean signature overlap of planted pairs: {sum(overlaps) / len(overlaps):.3f}")


# -----------------------------------------------------------
# Entrypoint
# -----------------------------------------------------------


def _add_config_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", type=Path, help="YAML file with LSH parameters")
    p.add_argument("--shingle-size", type=int, help="Characters per shingle")
    p.add_argument("--signature-length", type=int, help="Smallest hashes kept per document (K)")
    p.add_argument("--band-width", type=int, help="Signature values per band (W)")
    p.add_argument("--top-n", type=int, help="Number of results to return")
    p.add_argument("--seed", type=int, help="xxHash seed")
    p.add_argument("--max-candidates", type=int, help="Cap on candidates scored per query")
    p.add_argument("--workers", type=int, default=None,
                   help="Worker processes (0 = one per CPU, default: serial)")
    p.add_argument("-q", "--quiet", action="store_true", help="Suppress progress output")


def main(argv: List[str] | None = None) -> None:  # noqa: D401 – simple
    parser = argparse.ArgumentParser(
        prog="shinglesearch",
        description="Near-duplicate text search with MinHash + LSH banding",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Log progress (-vv for debug output)")
    sub = parser.add_subparsers(required=True, dest="cmd")

    # search
    p_search = sub.add_parser("search", help="Find near-duplicates of a query or a corpus document")
    p_search.add_argument("corpus", type=Path, help="Corpus file, one document per line")
    target = p_search.add_mutually_exclusive_group(required=True)
    target.add_argument("--query", help="Query text")
    target.add_argument("--doc-id", type=int, help="Use corpus document DOC_ID as the query")
    p_search.add_argument("--json", action="store_true", help="Emit results as JSON")
    _add_config_args(p_search)
    p_search.set_defaults(func=_cmd_search)

    # stats
    p_stats = sub.add_parser("stats", help="Index a corpus and print bucket statistics")
    p_stats.add_argument("corpus", type=Path, help="Corpus file, one document per line")
    _add_config_args(p_stats)
    p_stats.set_defaults(func=_cmd_stats)

    # demo
    p_demo = sub.add_parser("demo", help="Measure recall on a synthetic corpus")
    p_demo.add_argument("--documents", type=int, default=1000, help="Corpus size (default: 1000)")
    p_demo.add_argument("--duplicates", type=int, default=50,
                        help="Planted near-duplicates (default: 50)")
    p_demo.add_argument("--length", type=int, default=100, help="Document length (default: 100)")
    p_demo.add_argument("--corpus-seed", type=int, default=0, help="Random seed for the corpus")
    _add_config_args(p_demo)
    p_demo.set_defaults(func=_cmd_demo)

    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose > 1 else logging.INFO,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        )

    try:
        args.func(args)
    except (ShingleSearchError, OSError, IndexError, ValueError) as e:
        print(f"shinglesearch: error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":  # pragma: no cover
    main()

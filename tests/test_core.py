"""Basic sanity tests for shingling, signatures, banding and configuration."""
from __future__ import annotations

import numpy as np
import pytest

from shinglesearch.detector.bands import band_keys, banded_signature
from shinglesearch.detector.config import LSHConfig, load_config
from shinglesearch.detector.errors import ConfigError, DocumentTooShortError
from shinglesearch.detector.ingest import char_ngrams, read_corpus, shingle_hashes
from shinglesearch.detector.lsh_index import LSHIndex, sketch_document
from shinglesearch.detector.minhash import batch_xxhash64, compute_signature, hash_xx64

# ---------------------------------------------------------------------------
# Shingles
# ---------------------------------------------------------------------------


def test_char_ngrams_overlap() -> None:
    assert list(char_ngrams("ABCDE", 3)) == ["ABC", "BCD", "CDE"]


def test_shingle_hashes_deduplicate() -> None:
    assert len(shingle_hashes("AAAAAAA", 3)) == 1
    assert shingle_hashes("ABCDE", 3) == {hash_xx64(s) for s in ("ABC", "BCD", "CDE")}


def test_shingle_hashes_stable() -> None:
    text = "the quick brown fox jumps over the lazy dog"
    assert shingle_hashes(text, 4) == shingle_hashes(text, 4)
    assert shingle_hashes(text, 4, seed=1) != shingle_hashes(text, 4)


def test_shingle_exact_width_document() -> None:
    assert len(shingle_hashes("ABC", 3)) == 1


def test_shingle_too_short() -> None:
    with pytest.raises(DocumentTooShortError) as info:
        shingle_hashes("AB", 3, doc_id=7)
    assert info.value.doc_id == 7
    assert info.value.length == 2
    assert info.value.required == 3


def test_shingle_rejects_non_text() -> None:
    with pytest.raises(TypeError):
        shingle_hashes(None, 3)  # type: ignore[arg-type]


def test_batch_hash_is_unsigned_64_bit() -> None:
    hashes = batch_xxhash64(["a", "b", "c"])
    assert all(0 <= h < 1 << 64 for h in hashes)
    assert hashes == [hash_xx64(s) for s in ("a", "b", "c")]


# ---------------------------------------------------------------------------
# Signatures
# ---------------------------------------------------------------------------


def test_signature_keeps_k_smallest_ascending() -> None:
    sig = compute_signature({5, 3, 9, 1, 7}, 3)
    assert sig.tolist() == [1, 3, 5]


def test_signature_short_input_is_not_padded() -> None:
    sig = compute_signature({42, 7}, 10)
    assert sig.tolist() == [7, 42]


def test_signature_unsigned_ordering() -> None:
    top = (1 << 64) - 1
    sig = compute_signature({top, 1 << 63, 0}, 3)
    assert sig.dtype == np.dtype("<u8")
    assert [int(v) for v in sig] == [0, 1 << 63, top]


def test_signature_rejects_non_positive_k() -> None:
    with pytest.raises(ValueError):
        compute_signature({1, 2}, 0)


# ---------------------------------------------------------------------------
# Bands
# ---------------------------------------------------------------------------


def test_band_count_and_slots() -> None:
    sig = compute_signature(range(100, 110), 10)
    pairs = banded_signature(sig, 2)
    assert [slot for slot, _ in pairs] == [0, 1, 2, 3, 4]


def test_band_order_matters() -> None:
    forward = dict(band_keys(np.array([1, 2], dtype="<u8"), 2))
    backward = dict(band_keys(np.array([2, 1], dtype="<u8"), 2))
    assert forward[0] != backward[0]


def test_partial_band_dropped() -> None:
    sig = np.array([1, 2, 3, 4, 5], dtype="<u8")
    assert len(banded_signature(sig, 2)) == 2


def test_band_keys_are_slot_scoped() -> None:
    # Identical band values in slot 0 and slot 1 give the same key ...
    (_, k0), (_, k1) = banded_signature(np.array([1, 2, 1, 2], dtype="<u8"), 2)
    assert k0 == k1
    # ... but a slot-1 lookup never reads the slot-0 table.
    cfg = LSHConfig(signature_length=4, band_width=2)
    index = LSHIndex(cfg, [{k0: (0,)}, {}], num_documents=1)
    assert index.candidates([(1, k0)]) == set()
    assert index.candidates([(0, k0)]) == {0}


# ---------------------------------------------------------------------------
# Sketching
# ---------------------------------------------------------------------------


def test_sketch_requires_one_full_band() -> None:
    cfg = LSHConfig(shingle_size=3, signature_length=10, band_width=2)
    with pytest.raises(DocumentTooShortError) as info:
        sketch_document("AAAAAA", cfg)
    assert info.value.required == 2


def test_sketch_partial_signature() -> None:
    cfg = LSHConfig(shingle_size=3, signature_length=10, band_width=2)
    sketch = sketch_document("ABCDEFGHI", cfg)  # 7 distinct shingles
    assert len(sketch.signature) == 7
    assert len(sketch.band_keys) == 3


def test_sketch_full_signature() -> None:
    cfg = LSHConfig(shingle_size=3, signature_length=10, band_width=2)
    sketch = sketch_document("ABCDEFGHIJKLMNOPQRSTUVWXYZ", cfg)
    assert len(sketch.signature) == 10
    assert sketch.signature.tolist() == sorted(sketch.shingles)[:10]
    assert len(sketch.band_keys) == cfg.num_bands


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


def test_config_defaults() -> None:
    cfg = LSHConfig()
    assert (cfg.shingle_size, cfg.signature_length, cfg.band_width) == (3, 10, 2)
    assert cfg.num_bands == 5


@pytest.mark.parametrize(
    "kwargs",
    [
        {"signature_length": 10, "band_width": 3},
        {"shingle_size": 0},
        {"signature_length": -2},
        {"band_width": 0},
        {"top_n": -1},
        {"shingle_size": True},
        {"max_candidates": 0},
        {"seed": -1},
    ],
)
def test_config_rejects_invalid(kwargs) -> None:
    with pytest.raises(ConfigError):
        LSHConfig(**kwargs)


def test_config_overrides_are_validated() -> None:
    cfg = LSHConfig()
    assert cfg.with_overrides(signature_length=100, top_n=None).signature_length == 100
    with pytest.raises(ConfigError):
        cfg.with_overrides(band_width=3)


def test_config_from_mapping_unknown_key() -> None:
    with pytest.raises(ConfigError, match="bands"):
        LSHConfig.from_mapping({"bands": 4})


def test_load_config_yaml(tmp_path) -> None:
    path = tmp_path / "lsh.yml"
    path.write_text("shingle_size: 4\nsignature_length: 100\nband_width: 5\ntop_n: 3\n")
    cfg = load_config(path)
    assert cfg == LSHConfig(shingle_size=4, signature_length=100, band_width=5, top_n=3)


def test_load_config_empty_file_uses_defaults(tmp_path) -> None:
    path = tmp_path / "empty.yml"
    path.write_text("")
    assert load_config(path) == LSHConfig()


def test_load_config_invalid(tmp_path) -> None:
    path = tmp_path / "bad.yml"
    path.write_text("signature_length: 9\nband_width: 2\n")
    with pytest.raises(ConfigError):
        load_config(path)
    path.write_text("- just\n- a list\n")
    with pytest.raises(ConfigError):
        load_config(path)


# ---------------------------------------------------------------------------
# Corpus files
# ---------------------------------------------------------------------------


def test_read_corpus_keeps_line_ids(tmp_path) -> None:
    path = tmp_path / "corpus.txt"
    path.write_text("first doc\n\nthird doc\r\n", encoding="utf-8")
    assert read_corpus(path) == ["first doc", "", "third doc"]


def test_read_corpus_missing(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        read_corpus(tmp_path / "nope.txt")

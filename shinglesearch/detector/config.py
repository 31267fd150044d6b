"""Index configuration: validation and YAML loading."""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml  # type: ignore

from .errors import ConfigError

# Defaults of the original prototype: 3-char shingles, 10 hashes, bands of 2.
DEFAULT_SHINGLE_SIZE = 3
DEFAULT_SIGNATURE_LENGTH = 10
DEFAULT_BAND_WIDTH = 2
DEFAULT_TOP_N = 10


@dataclass(frozen=True)
class LSHConfig:
    """Parameters shared by index build and query.

    Attributes
    ----------
    shingle_size : int
        Characters per shingle (``S``).
    signature_length : int
        Number of smallest shingle hashes kept per document (``K``).
    band_width : int
        Signature values per band (``W``); ``K`` must be a multiple of it.
    top_n : int
        Default number of results returned by a search.
    seed : int
        xxHash seed used for shingle and bucket hashing.
    max_candidates : int | None
        Optional cap on the candidate set size before exact scoring.
    """

    shingle_size: int = DEFAULT_SHINGLE_SIZE
    signature_length: int = DEFAULT_SIGNATURE_LENGTH
    band_width: int = DEFAULT_BAND_WIDTH
    top_n: int = DEFAULT_TOP_N
    seed: int = 0
    max_candidates: Optional[int] = None

    def __post_init__(self) -> None:
        for name in ("shingle_size", "signature_length", "band_width"):
            value = getattr(self, name)
            if not _is_int(value) or value <= 0:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
        if not _is_int(self.top_n) or self.top_n < 0:
            raise ConfigError(f"top_n must be a non-negative integer, got {self.top_n!r}")
        if not _is_int(self.seed) or not 0 <= self.seed < 1 << 64:
            raise ConfigError(f"seed must be an unsigned 64-bit integer, got {self.seed!r}")
        if self.max_candidates is not None and (
            not _is_int(self.max_candidates) or self.max_candidates <= 0
        ):
            raise ConfigError(
                f"max_candidates must be a positive integer or None, got {self.max_candidates!r}"
            )
        if self.signature_length % self.band_width != 0:
            raise ConfigError(
                f"signature_length ({self.signature_length}) must be a multiple of "
                f"band_width ({self.band_width})"
            )

    @property
    def num_bands(self) -> int:
        """Band slots for a full-length signature."""
        return self.signature_length // self.band_width

    def with_overrides(self, **overrides: Any) -> "LSHConfig":
        """Return a copy with the non-*None* *overrides* applied (and re-validated)."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "LSHConfig":
        """Build a config from a plain mapping; unknown keys are rejected."""
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ConfigError(f"configuration must be a mapping, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"unknown configuration keys: {', '.join(unknown)}")
        return cls(**dict(data))


def load_config(path: Union[str, Path]) -> LSHConfig:
    """Read an :class:`LSHConfig` from a YAML file.

    The file holds a flat mapping of ``LSHConfig`` field names, e.g.::

        shingle_size: 3
        signature_length: 100
        band_width: 2
        top_n: 5
    """
    cfg_path = Path(path).expanduser()
    with cfg_path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"{cfg_path}: invalid YAML ({e})") from e
    return LSHConfig.from_mapping(data)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)

"""Configuration and constants for dark blob filtering."""

import json
from dataclasses import asdict, dataclass, fields, replace as dc_replace
from pathlib import Path
from typing import Dict, Optional


# Pixels at or below this intensity may start a new blob.
SEED_THRESHOLD = 40
# Neighbours at or below this intensity may join a blob that is already growing.
EXPANSION_THRESHOLD = 60

MIN_BLOB_PIXELS = 3
MAX_BLOB_PIXELS = 10000
RADIUS_TOLERANCE = 1.5

DEFAULT_OUTPUT_DIR = "out"


@dataclass(frozen=True)
class FilterSettings:
    """Detection and classification parameters shared by every worker."""
    seed_threshold: int = SEED_THRESHOLD
    expansion_threshold: int = EXPANSION_THRESHOLD
    min_pixels: int = MIN_BLOB_PIXELS
    max_pixels: int = MAX_BLOB_PIXELS
    radius_tolerance: float = RADIUS_TOLERANCE

    def __post_init__(self) -> None:
        for name in ("seed_threshold", "expansion_threshold"):
            value = getattr(self, name)
            if not (0 <= value <= 255):
                raise ValueError(f"{name} must be in range [0, 255], got {value}")
        if self.seed_threshold > self.expansion_threshold:
            raise ValueError(
                "seed_threshold must not exceed expansion_threshold "
                f"({self.seed_threshold} > {self.expansion_threshold})"
            )
        if self.min_pixels < 1:
            raise ValueError(f"min_pixels must be >= 1, got {self.min_pixels}")
        if self.max_pixels < self.min_pixels:
            raise ValueError(
                f"max_pixels must be >= min_pixels ({self.max_pixels} < {self.min_pixels})"
            )
        if self.radius_tolerance <= 0:
            raise ValueError(f"radius_tolerance must be > 0, got {self.radius_tolerance}")

    def replace(self, **overrides) -> "FilterSettings":
        """Return a copy with the non-None overrides applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        return dc_replace(self, **changes)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def load_filter_settings(config_file: Optional[Path] = None) -> FilterSettings:
    """Load filter settings from a JSON object file; fallback to defaults.

    Args:
        config_file: Optional path to a JSON file whose keys are
            ``FilterSettings`` field names.

    Returns:
        FilterSettings with the file's values merged over the defaults.

    Raises:
        FileNotFoundError: If ``config_file`` is given but does not exist.
        ValueError: If the file is not a JSON object, names an unknown key,
            or holds an out-of-range value.
    """
    if config_file is None:
        return FilterSettings()
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_file}")
    with config_file.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in {config_file}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("Invalid config file; expected a JSON object.")

    known = {field.name for field in fields(FilterSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown config key(s): {', '.join(unknown)}")

    values: Dict[str, float] = {}
    for key, value in data.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"Config value for {key!r} must be a number, got {value!r}")
        values[key] = float(value) if key == "radius_tolerance" else int(value)
    return FilterSettings(**values)

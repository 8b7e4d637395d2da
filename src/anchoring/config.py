"""Anchoring tunables.

Defaults reproduce the thresholds the resolution ladder and materializer were
calibrated with. A policy mapping (usually a JSON file) can override any of
them; values that do not parse are skipped so a partially broken policy still
yields a usable config.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import orjson


@dataclass(frozen=True, slots=True)
class AnchoringConfig:
    fuzzy_window: int = 200
    fuzzy_min_prefix: int = 20
    reconcile_window: int = 150
    low_confidence: float = 0.5
    min_highlight_length: int = 10
    max_highlight_length: int = 100
    collapsed_span_floor: int = 20

    def __post_init__(self) -> None:
        if self.fuzzy_window < 0 or self.reconcile_window < 0:
            raise ValueError("search windows must be >= 0")
        if self.fuzzy_min_prefix < 1:
            raise ValueError(f"fuzzy_min_prefix must be >= 1, got {self.fuzzy_min_prefix}")
        if not 0.0 <= self.low_confidence <= 1.0:
            raise ValueError(f"low_confidence must be in [0, 1], got {self.low_confidence}")
        if not 0 < self.min_highlight_length <= self.max_highlight_length:
            raise ValueError(
                "highlight length bounds must satisfy 0 < min <= max, got "
                f"{self.min_highlight_length}..{self.max_highlight_length}",
            )
        if self.collapsed_span_floor < 1:
            raise ValueError("collapsed_span_floor must be >= 1")


DEFAULT_CONFIG = AnchoringConfig()

_FIELD_TYPES: dict[str, type] = {
    f.name: (float if f.name == "low_confidence" else int) for f in fields(AnchoringConfig)
}


def config_from_dict(
    policy: dict[str, Any] | None,
    base: AnchoringConfig = DEFAULT_CONFIG,
) -> AnchoringConfig:
    """Overlay *policy* onto *base*.

    Args:
        policy: Mapping of field name to value. ``None`` or empty returns *base*.
        base: Config to start from.

    Returns:
        A new AnchoringConfig.

    Raises:
        ValueError: If *policy* names an unknown field, or the merged values
            violate the config invariants.
    """
    if not policy:
        return base
    unknown = sorted(set(policy) - set(_FIELD_TYPES))
    if unknown:
        raise ValueError(f"Unknown anchoring config keys: {', '.join(unknown)}")

    updates: dict[str, Any] = {}
    for key, raw in policy.items():
        try:
            updates[key] = _FIELD_TYPES[key](raw)
        except (TypeError, ValueError):
            continue
    return replace(base, **updates)


def load_config(path: Path) -> AnchoringConfig:
    """Load a JSON policy file and overlay it onto the defaults."""
    payload = orjson.loads(path.read_bytes())
    if not isinstance(payload, dict):
        raise ValueError(f"Config file must hold a JSON object: {path}")
    return config_from_dict(payload)

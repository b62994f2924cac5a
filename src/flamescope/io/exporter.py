"""
Snapshot export.

Writes the accumulated RGBA buffer as PNG and a JSON sidecar
describing the session that produced it.
"""

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Optional, Union

import numpy as np
from PIL import Image

from flamescope.engine import EngineState, pixel_buffer


@dataclass
class SnapshotMetadata:
    """Session summary stored next to an exported image."""

    resolution: int
    seed_rounds: int
    seed_points: int
    max_depth: int
    branching_factor: int
    total_leaves: int
    leaves_visited: int
    exhausted: bool
    samples: int
    color_axis: list[float]
    rng_seed: Optional[int] = None
    schema_version: str = "1.0"


class SnapshotExporter:
    """Exports engine snapshots to PNG and JSON."""

    def __init__(self, precision: int = 6):
        """
        Initialize the exporter.

        Args:
            precision: Decimal places for floating point values.
        """
        self.precision = precision

    def _round(self, value: float) -> float:
        return round(float(value), self.precision)

    def build_metadata(
        self,
        state: EngineState,
        rng_seed: Optional[int] = None,
    ) -> SnapshotMetadata:
        acc = state.accumulator
        return SnapshotMetadata(
            resolution=state.resolution,
            seed_rounds=state.seed_rounds,
            seed_points=len(state.seed),
            max_depth=state.max_depth,
            branching_factor=state.branching_factor,
            total_leaves=state.total_leaves,
            leaves_visited=state.leaves_visited,
            exhausted=state.exhausted,
            samples=acc.samples,
            color_axis=[self._round(v) for v in acc.color_axis],
            rng_seed=rng_seed,
        )

    def to_dict(
        self,
        state: EngineState,
        rng_seed: Optional[int] = None,
    ) -> dict[str, Any]:
        """Return snapshot metadata as a dictionary."""
        return asdict(self.build_metadata(state, rng_seed))

    def export_png(
        self,
        state: EngineState,
        output_path: Union[str, Path],
    ) -> Path:
        """
        Write the current pixel buffer as an RGBA PNG.

        Returns:
            Path to written file.
        """
        output_path = Path(output_path)
        buffer = np.ascontiguousarray(pixel_buffer(state))
        Image.fromarray(buffer).save(output_path, format="PNG")
        return output_path

    def export_json(
        self,
        state: EngineState,
        output_path: Union[str, Path],
        rng_seed: Optional[int] = None,
        indent: int = 2,
    ) -> Path:
        """
        Write snapshot metadata to a JSON file.

        Returns:
            Path to written file.
        """
        output_path = Path(output_path)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(state, rng_seed), f, indent=indent)

        return output_path

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable
import math
import numpy as np

from ..exceptions import InvalidArgumentError


@dataclass(frozen=True, eq=False)
class Kernel:
    """
    Value-object holding a 3x3 convolution kernel.

    ``weights[0][0]`` lines up with the neighbour above-left of the
    centre pixel and ``weights[2][2]`` with the one below-right
    (the kernel is applied as written, it is not flipped).
    """
    weights: np.ndarray  # Shape (3, 3), float64, read-only.
    name: str = "custom"

    def __post_init__(self):
        try:
            arr = np.array(self.weights, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"Kernel weights must be numbers: {e}") from e
        if arr.shape != (3, 3):
            raise InvalidArgumentError(f"Kernel must be 3x3, got shape {arr.shape}")
        if not np.all(np.isfinite(arr)):
            raise InvalidArgumentError("Kernel weights must be finite")
        # the largest possible weighted sum of 8-bit pixels must stay finite
        with np.errstate(over="ignore"):
            worst = np.abs(arr).sum() * 255
        if not np.isfinite(worst):
            raise InvalidArgumentError("Kernel weights are too large")
        arr.setflags(write=False)
        object.__setattr__(self, "weights", arr)

    @classmethod
    def from_values(cls, values: Iterable[float], name: str = "custom") -> "Kernel":
        """Build a kernel from nine numbers given row by row."""
        try:
            flat = [float(v) for v in values]
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"Kernel weights must be numbers: {e}") from e
        if len(flat) != 9:
            raise InvalidArgumentError(f"A 3x3 kernel needs 9 weights, got {len(flat)}")
        return cls(np.array(flat).reshape(3, 3), name=name)

    @property
    def normalizer(self) -> float:
        """
        Sum of the weights, or 1 when they sum to zero.
        Zero-sum kernels (edge detectors) are therefore left unscaled.
        """
        total = float(self.weights.sum())
        return 1.0 if total == 0.0 else total

    def as_lists(self) -> list[list[float]]:
        return self.weights.tolist()

    def __eq__(self, other):
        if not isinstance(other, Kernel):
            return NotImplemented
        return np.array_equal(self.weights, other.weights)

    def __repr__(self):
        return f"Kernel(name={self.name!r}, weights={self.as_lists()})"


# ─── Presets ───────────────────────────────────────────────────────
SOBEL_X = Kernel([[-1, 0, 1],
                  [-2, 0, 2],
                  [-1, 0, 1]], name="sobel-x")      # vertical edges

SOBEL_Y = Kernel([[-1, -2, -1],
                  [0, 0, 0],
                  [1, 2, 1]], name="sobel-y")       # horizontal edges

LAPLACIAN = Kernel([[0, -1, 0],
                    [-1, 4, -1],
                    [0, -1, 0]], name="laplacian")  # edges in every direction

PRESETS: Dict[str, Kernel] = {k.name: k for k in (SOBEL_X, SOBEL_Y, LAPLACIAN)}


def get_preset(name: str) -> Kernel:
    key = name.strip().lower().replace("_", "-")
    if key not in PRESETS:
        raise InvalidArgumentError(
            f"Unknown kernel '{name}'. Available: {', '.join(sorted(PRESETS))}"
        )
    return PRESETS[key]

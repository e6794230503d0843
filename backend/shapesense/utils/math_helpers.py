"""Math helpers — CV, jump counting. No engine imports."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray


def coefficient_of_variation(values: NDArray[np.float64]) -> float:
    """CV = std / mean (population std). Used for star detection."""
    mean = float(np.mean(values))
    if abs(mean) < 1e-10:
        return float("inf")
    return float(np.std(values) / mean)


def count_cyclic_jumps(values: NDArray[np.float64], threshold: float) -> int:
    """Count consecutive pairs (wrapping last→first) differing by more than threshold."""
    if len(values) == 0:
        return 0
    jumps = np.abs(values - np.roll(values, -1))
    return int(np.count_nonzero(jumps > threshold))

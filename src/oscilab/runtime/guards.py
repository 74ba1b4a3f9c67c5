from __future__ import annotations

import math
import numpy as np

__all__ = ["allfinite1d", "first_nonfinite"]


def allfinite1d(x: np.ndarray) -> bool:
    for i in range(x.size):
        if not math.isfinite(x[i]):
            return False
    return True


def first_nonfinite(samples: np.ndarray) -> int:
    """
    Return the first sample (column) index holding a NaN/Inf component,
    or -1 when every sample is finite.
    Samples are laid out as (n_state, n_samples).
    """
    if samples.size == 0:
        return -1
    bad = ~np.isfinite(samples).all(axis=0)
    if not bad.any():
        return -1
    return int(np.argmax(bad))

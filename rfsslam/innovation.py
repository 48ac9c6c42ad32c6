"""Innovation for range-bearing measurements, with the bearing wrapped and optional gating."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from rfsslam.gaussian import RandomVec


def _vector(z) -> np.ndarray:
    if isinstance(z, RandomVec):
        return z.mean.copy()
    return np.atleast_1d(np.array(z, dtype=float))


@dataclass
class RangeBearingInnovation:
    """Innovation of a measurement whose first two entries are range and bearing.

    Any further entries (such as a landmark size) are differenced as they are.
    A threshold that is not positive is ignored; otherwise an innovation whose
    magnitude exceeds it is rejected.
    """

    range_innovation_threshold: float = -1.0
    bearing_innovation_threshold: float = -1.0

    def calculate(self, z_exp, z_act) -> tuple[np.ndarray, bool]:
        """Return ``(z_act - z_exp, accepted)`` with the bearing wrapped into ``[-pi, pi]``."""
        expected = _vector(z_exp)
        actual = _vector(z_act)
        if expected.shape != actual.shape:
            raise ValueError(
                f"measurement shapes differ: {expected.shape} and {actual.shape}")
        if expected.shape[0] < 2:
            raise ValueError("a range-bearing measurement needs at least two entries")

        innovation = actual - expected
        bearing = float(innovation[1])
        while bearing > math.pi:
            bearing -= 2 * math.pi
        while bearing < -math.pi:
            bearing += 2 * math.pi
        innovation[1] = bearing

        accepted = True
        if (self.range_innovation_threshold > 0
                and abs(innovation[0]) > self.range_innovation_threshold):
            accepted = False
        if (self.bearing_innovation_threshold > 0
                and abs(innovation[1]) > self.bearing_innovation_threshold):
            accepted = False
        return innovation, accepted
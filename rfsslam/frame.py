"""2d coordinate frames that can be chained and used to move points to a base frame."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from rfsslam.gaussian import RandomVec


@dataclass(eq=False)
class Frame2d(RandomVec):
    """A frame ``(x, y, theta)`` giving its pose relative to a ``base`` frame."""

    base: Frame2d | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.n_dim != 3:
            raise ValueError(f"a 2d frame needs three entries, got {self.n_dim}")

    @property
    def position(self) -> np.ndarray:
        return self.mean[:2].copy()

    @property
    def angle(self) -> float:
        return float(self.mean[2])

    def rotation_matrix(self) -> np.ndarray:
        """Rotation taking vectors in this frame to the base frame."""
        a = self.angle
        return np.array([[math.cos(a), -math.sin(a)], [math.sin(a), math.cos(a)]])

    def __mul__(self, other: Frame2d) -> Frame2d:
        """Compose with ``other`` (given relative to this frame) into a frame relative to ``base``."""
        if not isinstance(other, Frame2d):
            return NotImplemented
        r_bc = self.rotation_matrix()
        r_bd = r_bc @ other.rotation_matrix()
        t_bd = r_bc @ other.position + self.position
        angle = math.atan2(r_bd[1, 0], r_bd[0, 0])
        return Frame2d([t_bd[0], t_bd[1], angle], None, max(self.time, other.time), self.base)

    def to_base(self, point, cov=None) -> tuple[np.ndarray, np.ndarray | None]:
        """Express a point of this frame in the base frame, with its covariance if given."""
        p = np.array(point, dtype=float)
        if p.shape != (2,):
            raise ValueError(f"point must have two entries, got shape {p.shape}")
        r = self.rotation_matrix()
        p_b = r @ p + self.position
        if cov is None:
            return p_b, None
        c = np.array(cov, dtype=float)
        if c.shape != (2, 2):
            raise ValueError(f"covariance must be 2x2, got shape {c.shape}")
        return p_b, r @ c @ r.T

    def random_vec_to_base(self, point: RandomVec) -> RandomVec:
        """Express an uncertain point of this frame in the base frame, keeping its time."""
        mean, cov = self.to_base(point.mean, point.cov)
        return RandomVec(mean, cov, point.time)
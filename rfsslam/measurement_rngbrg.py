"""Range-bearing measurement model for 2d point landmarks."""

from __future__ import annotations

import math

import numpy as np

from rfsslam.gaussian import RandomVec
from rfsslam.measurement_model import MeasurementModel, Prediction, RangeSensorConfig


def _wrap_angle(angle: float) -> float:
    while angle > math.pi:
        angle -= 2 * math.pi
    while angle < -math.pi:
        angle += 2 * math.pi
    return angle


class MeasurementModelRngBrg(MeasurementModel):
    """``z = (|m - p|, atan2(m - p) - theta) + e`` for pose ``(x, y, theta)`` and landmark ``m``."""

    measurement_dim = 2

    def __init__(self, noise=None, config: RangeSensorConfig | None = None) -> None:
        super().__init__(noise)
        self.config = config if config is not None else RangeSensorConfig()

    @classmethod
    def from_variances(cls, sr: float, sb: float,
                       config: RangeSensorConfig | None = None) -> MeasurementModelRngBrg:
        """Build a model with uncorrelated range and bearing noise variances."""
        return cls(np.diag([sr, sb]), config)

    def measure(self, pose: RandomVec, landmark: RandomVec) -> Prediction:
        """Predict the range and bearing of ``landmark`` seen from ``pose``."""
        x, y, theta = pose.mean
        dx = float(landmark.mean[0] - x)
        dy = float(landmark.mean[1] - y)
        range2 = dx * dx + dy * dy
        if range2 == 0.0:
            raise ValueError("landmark coincides with the sensor position")
        rng = math.sqrt(range2)
        bearing = _wrap_angle(math.atan2(dy, dx) - theta)

        mean = np.array([rng, bearing])
        h_lmk = np.array([[dx / rng, dy / rng],
                          [-dy / range2, dx / range2]])
        h_pose = np.array([[-dx / rng, -dy / rng, 0.0],
                           [dy / range2, -dx / range2, -1.0]])
        cov = h_lmk @ landmark.cov @ h_lmk.T + h_pose @ pose.cov @ h_pose.T + self.noise
        valid = self.config.range_lim_min <= rng <= self.config.range_lim_max
        return Prediction(RandomVec(mean, cov, pose.time), valid, h_lmk, h_pose)

    def inverse_measure(self, pose: RandomVec, measurement: RandomVec) -> RandomVec:
        """Return the landmark position implied by ``measurement``, with noise-only covariance."""
        x, y, theta = pose.mean
        rng, bearing = measurement.mean
        angle = theta + bearing
        c, s = math.cos(angle), math.sin(angle)
        mean = np.array([x + rng * c, y + rng * s])
        h_inv = np.array([[c, -rng * s], [s, rng * c]])
        cov = h_inv @ self.noise @ h_inv.T
        return RandomVec(mean, cov, measurement.time)

    def probability_of_detection(self, pose: RandomVec,
                                 landmark: RandomVec) -> tuple[float, bool]:
        """Return ``(probability, close_to_sensing_limit)`` from the range to ``landmark``."""
        cfg = self.config
        rng = math.hypot(landmark.mean[0] - pose.mean[0], landmark.mean[1] - pose.mean[1])
        if cfg.range_lim_min <= rng <= cfg.range_lim_max:
            close = (rng >= cfg.range_lim_max - cfg.range_lim_buffer
                     or rng <= cfg.range_lim_min + cfg.range_lim_buffer)
            return cfg.probability_of_detection, close
        close = (cfg.range_lim_min - cfg.range_lim_buffer
                 <= rng <= cfg.range_lim_max + cfg.range_lim_buffer)
        return 0.0, close

    def clutter_intensity(self, z: RandomVec, n_z: int) -> float:
        """Uniform clutter intensity."""
        return self.config.uniform_clutter_intensity

    def clutter_intensity_integral(self, n_z: int = 0) -> float:
        """Expected clutter count over the annulus the sensor covers."""
        cfg = self.config
        area = math.pi * (cfg.range_lim_max ** 2 - cfg.range_lim_min ** 2)
        return cfg.uniform_clutter_intensity * area
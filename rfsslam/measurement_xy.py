"""Measurement model giving a 2d landmark's x-y position in the robot frame."""

from __future__ import annotations

import math

import numpy as np

from rfsslam.gaussian import RandomVec
from rfsslam.measurement_model import MeasurementModel, Prediction, RangeSensorConfig


class MeasurementModelXY(MeasurementModel):
    """``z = R(theta)^T (m - p) + e`` for pose ``(x, y, theta)`` and landmark ``m``."""

    measurement_dim = 2

    def __init__(self, noise=None, config: RangeSensorConfig | None = None) -> None:
        super().__init__(noise)
        self.config = config if config is not None else RangeSensorConfig()

    @classmethod
    def from_variances(cls, sx: float, sy: float,
                       config: RangeSensorConfig | None = None) -> MeasurementModelXY:
        """Build a model with uncorrelated x and y noise variances."""
        return cls(np.diag([sx, sy]), config)

    def measure(self, pose: RandomVec, landmark: RandomVec) -> Prediction:
        """Predict the relative x-y measurement of ``landmark`` from ``pose``."""
        x, y, theta = pose.mean
        dx = landmark.mean[0] - x
        dy = landmark.mean[1] - y
        c, s = math.cos(theta), math.sin(theta)
        rng = math.hypot(dx, dy)

        mean = np.array([c * dx + s * dy, -s * dx + c * dy])
        h_lmk = np.array([[c, s], [-s, c]])
        h_pose = np.array([[-c, -s, -dx * s + dy * c],
                           [s, -c, -dx * c - dy * s]])
        cov = h_lmk @ landmark.cov @ h_lmk.T + h_pose @ pose.cov @ h_pose.T + self.noise
        valid = self.config.range_lim_min <= rng <= self.config.range_lim_max
        return Prediction(RandomVec(mean, cov, pose.time), valid, h_lmk, h_pose)

    def inverse_measure(self, pose: RandomVec, measurement: RandomVec) -> RandomVec:
        """Return the landmark position implied by ``measurement``, with noise-only covariance."""
        x, y, theta = pose.mean
        zx, zy = measurement.mean
        c, s = math.cos(theta), math.sin(theta)
        mean = np.array([x + c * zx - s * zy, y + s * zx + c * zy])
        h_inv = np.array([[c, -s], [s, c]])
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
        """Expected clutter count over the sensing region."""
        cfg = self.config
        area = 2 * math.pi * (cfg.range_lim_max - cfg.range_lim_min)
        return cfg.uniform_clutter_intensity * area
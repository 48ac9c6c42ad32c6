"""Range measurement model for landmarks on a line."""

from __future__ import annotations

import numpy as np

from rfsslam.gaussian import RandomVec
from rfsslam.measurement_model import MeasurementModel, Prediction, RangeSensorConfig


class MeasurementModelRng1D(MeasurementModel):
    """``z = m - x + e`` for a 1d pose ``x`` and landmark ``m``."""

    measurement_dim = 1

    def __init__(self, noise=None, config: RangeSensorConfig | None = None) -> None:
        super().__init__(noise)
        self.config = config if config is not None else RangeSensorConfig()

    @classmethod
    def from_variance(cls, sr: float,
                      config: RangeSensorConfig | None = None) -> MeasurementModelRng1D:
        """Build a model with range noise variance ``sr``."""
        return cls([[sr]], config)

    def measure(self, pose: RandomVec, landmark: RandomVec) -> Prediction:
        """Predict the signed distance from ``pose`` to ``landmark``."""
        z = landmark.mean - pose.mean
        cov = landmark.cov + pose.cov + self.noise
        distance = abs(float(z[0]))
        valid = self.config.range_lim_min <= distance <= self.config.range_lim_max
        return Prediction(RandomVec(z, cov, pose.time), valid,
                          np.array([[1.0]]), np.array([[-1.0]]))

    def inverse_measure(self, pose: RandomVec, measurement: RandomVec) -> RandomVec:
        """Return the landmark position implied by ``measurement``, with noise-only covariance."""
        return RandomVec(pose.mean + measurement.mean, self.noise.copy(), measurement.time)

    def probability_of_detection(self, pose: RandomVec,
                                 landmark: RandomVec) -> tuple[float, bool]:
        """Return ``(probability, close_to_sensing_limit)`` from the distance to ``landmark``."""
        cfg = self.config
        distance = abs(float(landmark.mean[0] - pose.mean[0]))
        if cfg.range_lim_min <= distance <= cfg.range_lim_max:
            pd = cfg.probability_of_detection
        else:
            pd = 0.0
        buf = cfg.range_lim_buffer
        close = (cfg.range_lim_max - buf <= distance <= cfg.range_lim_max + buf
                 or cfg.range_lim_min - buf <= distance <= cfg.range_lim_min + buf)
        return pd, close

    def clutter_intensity(self, z: RandomVec, n_z: int) -> float:
        """Uniform clutter intensity."""
        return self.config.uniform_clutter_intensity

    def clutter_intensity_integral(self, n_z: int = 0) -> float:
        """Expected clutter count over the sensed length."""
        cfg = self.config
        return cfg.uniform_clutter_intensity * (cfg.range_lim_max - cfg.range_lim_min)
"""Base class for sensor measurement models and the range-limited sensor configuration."""

from __future__ import annotations

import abc
from dataclasses import dataclass

import numpy as np

from rfsslam.gaussian import RandomVec


@dataclass
class RangeSensorConfig:
    """Detection and clutter settings for a sensor with a limited range.

    Beyond ``range_lim_max`` or closer than ``range_lim_min`` nothing is
    detected. Within ``range_lim_buffer`` of either limit a landmark counts as
    close to the sensing limit.
    """

    probability_of_detection: float = 0.95
    uniform_clutter_intensity: float = 0.1
    range_lim_max: float = 5.0
    range_lim_min: float = 0.3
    range_lim_buffer: float = 0.25


@dataclass
class Prediction:
    """A predicted measurement together with the Jacobians of the model.

    ``valid`` is false when the landmark lies outside what the sensor can measure.
    """

    measurement: RandomVec
    valid: bool
    jacobian_landmark: np.ndarray
    jacobian_pose: np.ndarray


class MeasurementModel(abc.ABC):
    """A model ``z = h(x, m) + e`` with zero-mean Gaussian noise ``e`` of covariance ``noise``."""

    measurement_dim: int = 2

    def __init__(self, noise=None) -> None:
        self._noise = np.zeros((self.measurement_dim, self.measurement_dim))
        if noise is not None:
            self.noise = noise

    @property
    def noise(self) -> np.ndarray:
        """Additive measurement noise covariance ``R``."""
        return self._noise

    @noise.setter
    def noise(self, value) -> None:
        matrix = np.atleast_2d(np.array(value, dtype=float))
        expected = (self.measurement_dim, self.measurement_dim)
        if matrix.shape != expected:
            raise ValueError(f"noise covariance must have shape {expected}, got {matrix.shape}")
        self._noise = matrix

    @abc.abstractmethod
    def measure(self, pose: RandomVec, landmark: RandomVec) -> Prediction:
        """Predict the measurement of ``landmark`` made from ``pose``."""

    def sample(self, pose: RandomVec, landmark: RandomVec,
               use_additive_noise: bool = True,
               use_pose_noise: bool = False,
               use_landmark_noise: bool = False,
               rng: np.random.Generator | None = None) -> tuple[RandomVec, bool]:
        """Draw a measurement of ``landmark`` from ``pose``.

        Pose and landmark are first sampled from their own covariances when
        asked. When the measurement is valid and ``use_additive_noise`` is set,
        noise drawn from ``noise`` is added and the result carries ``noise`` as
        its covariance. Returns ``(measurement, valid)``.
        """
        pose_sample = pose.sample(rng) if use_pose_noise else pose
        landmark_sample = landmark.sample(rng) if use_landmark_noise else landmark
        prediction = self.measure(pose_sample, landmark_sample)
        measurement = prediction.measurement
        if prediction.valid and use_additive_noise:
            measurement = RandomVec(measurement.mean, self._noise.copy(),
                                    measurement.time).sample(rng)
        return measurement, prediction.valid

    @abc.abstractmethod
    def inverse_measure(self, pose: RandomVec, measurement: RandomVec) -> RandomVec:
        """Return the landmark, with uncertainty, that ``measurement`` from ``pose`` implies."""

    def probability_of_detection(self, pose: RandomVec,
                                 landmark: RandomVec) -> tuple[float, bool]:
        """Return ``(probability, close_to_sensing_limit)``; always ``(1.0, False)`` here."""
        return 1.0, False

    def clutter_intensity(self, z: RandomVec, n_z: int) -> float:
        """Clutter intensity at ``z`` in a set of ``n_z`` measurements; 0 here."""
        return 0.0

    def clutter_intensity_integral(self, n_z: int = 0) -> float:
        """Expected number of clutter measurements; 0 here."""
        return 0.0
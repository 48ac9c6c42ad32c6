"""Measurement model for tree trunks seen by a planar laser scanner.

A landmark is ``(x, y, radius)``; a measurement is ``(range, bearing, diameter)``
with bearing taken from the sensor's right-hand side.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from rfsslam.gaussian import RandomVec
from rfsslam.measurement_model import MeasurementModel, Prediction
from rfsslam.measurement_rngbrg import MeasurementModelRngBrg

_SCAN_SIZE = 720
_BEAMS_PER_RADIAN = _SCAN_SIZE / (2 * math.pi)


@dataclass
class VictoriaParkConfig:
    """Detection and clutter settings for the laser scanner.

    ``probability_of_detection[k]`` is the detection probability when ``k``
    laser beams can see the landmark; larger counts use the last entry.
    """

    probability_of_detection: tuple[float, ...] = (1.0,)
    buffer_zone_pd: float = 0.0
    bearing_limit_min: float = -math.pi
    bearing_limit_max: float = math.pi
    range_lim_min: float = 0.0
    range_lim_max: float = math.inf
    expected_clutter_number: float = 0.0


class MeasurementModelVictoriaPark(MeasurementModel):
    """Range, bearing and size of a circular landmark, with range-dependent size noise."""

    measurement_dim = 3

    def __init__(self, noise=None, slb: float = 0.0,
                 config: VictoriaParkConfig | None = None) -> None:
        super().__init__()
        self.config = config if config is not None else VictoriaParkConfig()
        self._range_bearing = MeasurementModelRngBrg()
        self._laser_scan: list[float] = []
        self._clutter_intensity = 0.0
        self.slb = 0.0
        self.set_noise(np.zeros((3, 3)) if noise is None else noise, slb)

    @classmethod
    def from_blocks(cls, cov_p, cov_r: float, slb: float,
                    config: VictoriaParkConfig | None = None) -> MeasurementModelVictoriaPark:
        """Build a model from a 2x2 range-bearing covariance and a size variance."""
        noise = np.zeros((3, 3))
        noise[:2, :2] = np.array(cov_p, dtype=float)
        noise[2, 2] = cov_r
        return cls(noise, slb, config)

    @classmethod
    def from_variances(cls, sx: float, sy: float, sr: float, slb: float,
                       config: VictoriaParkConfig | None = None) -> MeasurementModelVictoriaPark:
        """Build a model with uncorrelated range, bearing and size variances."""
        return cls(np.diag([sx, sy, sr]), slb, config)

    @property
    def laser_scan(self) -> tuple[float, ...]:
        return tuple(self._laser_scan)

    def set_noise(self, r, slb: float) -> None:
        """Set the 3x3 noise covariance and the range-squared scale of the size variance."""
        self.noise = r
        self.slb = float(slb)
        self._range_bearing.noise = self.noise[:2, :2]

    def set_laser_scan(self, scan) -> None:
        """Store one laser sweep (one range per half degree) and update the clutter intensity."""
        ranges = [float(r) for r in scan]
        if not ranges:
            raise ValueError("laser scan must not be empty")
        area = sum(a * b for a, b in zip(ranges[1:], ranges[:-1]))
        area += ranges[0] * ranges[-1]
        area *= math.sin(math.pi / 360) / 2
        if area == 0:
            raise ValueError("laser scan encloses no area")
        self._laser_scan = ranges
        self._clutter_intensity = self.config.expected_clutter_number / area

    def _sensor_pose(self, pose: RandomVec) -> RandomVec:
        x, y, theta = pose.mean
        return RandomVec([x, y, theta - math.pi / 2], None, pose.time)

    def measure(self, pose: RandomVec, landmark: RandomVec) -> Prediction:
        """Predict ``(range, bearing, diameter)`` of ``landmark``; always valid."""
        lmk_2d = RandomVec(landmark.mean[:2], landmark.cov[:2, :2], landmark.time)
        inner = self._range_bearing.measure(self._sensor_pose(pose), lmk_2d)
        mean_2d = inner.measurement.mean
        mean = np.array([mean_2d[0], mean_2d[1], landmark.mean[2]])
        cov = np.zeros((3, 3))
        cov[:2, :2] = inner.measurement.cov
        cov[2, 2] = landmark.cov[2, 2] + self.noise[2, 2] + mean_2d[0] ** 2 * self.slb
        h_lmk = np.zeros((3, 3))
        h_lmk[:2, :2] = inner.jacobian_landmark
        h_lmk[2, 2] = 1.0
        h_pose = np.zeros((3, 3))
        h_pose[:2, :] = inner.jacobian_pose
        return Prediction(RandomVec(mean, cov, pose.time), True, h_lmk, h_pose)

    def inverse_measure(self, pose: RandomVec, measurement: RandomVec) -> RandomVec:
        """Return the landmark ``(x, y, radius)`` implied by ``measurement``."""
        meas_2d = RandomVec(measurement.mean[:2], measurement.cov[:2, :2], measurement.time)
        lmk_2d = self._range_bearing.inverse_measure(self._sensor_pose(pose), meas_2d)
        mean = np.array([lmk_2d.mean[0], lmk_2d.mean[1], measurement.mean[2]])
        cov = np.zeros((3, 3))
        cov[:2, :2] = lmk_2d.cov
        cov[2, 2] = self.noise[2, 2]
        return RandomVec(mean, cov, measurement.time)

    def probability_of_detection(self, pose: RandomVec,
                                 landmark: RandomVec) -> tuple[float, bool]:
        """Return ``(probability, close_to_sensing_limit)``, probing across the landmark's spread.

        Copies of the landmark are shifted sideways across three standard
        deviations of its position and the highest detection probability is kept.
        """
        radius = float(landmark.mean[2])
        if radius <= 0:
            raise ValueError("landmark radius must be positive")
        meas = self.measure(pose, landmark).measurement.mean
        angle = math.atan2(meas[1], meas[0]) + pose.mean[2]
        perp = np.array([-math.sin(angle), math.cos(angle)])
        spread = max(3 * math.sqrt(float(perp @ landmark.cov[:2, :2] @ perp)), 0.2)

        probabilities: list[float] = []
        close = False
        i = 1
        while (i - 1) * (2 * radius) < spread:
            for sign in (1, -1):
                shifted = landmark.mean.copy()
                shifted[:2] = landmark.mean[:2] + sign * i * 2 * radius * perp
                pd, close = self.probability_of_detection_single(
                    pose, RandomVec(shifted, landmark.cov, landmark.time))
                probabilities.append(pd)
            i += 1
        pd, close = self.probability_of_detection_single(pose, landmark)
        probabilities.append(pd)

        if min(probabilities) == 0 and max(probabilities) > 0:
            close = True
        return max(probabilities), close

    def probability_of_detection_single(self, pose: RandomVec,
                                        landmark: RandomVec) -> tuple[float, bool]:
        """Return ``(probability, close_to_sensing_limit)`` from the beams that reach the landmark."""
        table = self.config.probability_of_detection
        if not table:
            raise ValueError("probability of detection table must not be empty")
        cfg = self.config
        distance, angle, diameter = self.measure(pose, landmark).measurement.mean
        if (angle > cfg.bearing_limit_max or angle < cfg.bearing_limit_min
                or distance < cfg.range_lim_min or distance > cfg.range_lim_max):
            return 0.0, False

        radius = diameter / 2
        gamma = math.atan(radius / distance)
        max_points = math.floor(2 * gamma * _BEAMS_PER_RADIAN)

        close = False
        if len(table) > max_points:
            if table[max_points] == 0:
                return 0.0, False
            if table[max_points] < cfg.buffer_zone_pd:
                close = True

        min_beam = math.ceil((angle - gamma) * _BEAMS_PER_RADIAN)
        max_beam = (min_beam + max_points) % _SCAN_SIZE
        min_beam %= _SCAN_SIZE

        n_points = 0
        min_range = distance - radius - 6 * 0.03
        if (max_beam - min_beam + _SCAN_SIZE) % _SCAN_SIZE > 0:
            if len(self._laser_scan) < _SCAN_SIZE:
                raise RuntimeError(f"a laser scan of {_SCAN_SIZE} ranges must be set first")
            beam = min_beam
            while beam != max_beam:
                reading = self._laser_scan[beam]
                if reading > min_range or reading == 0:
                    n_points += 1
                beam = (beam + 1) % _SCAN_SIZE

        n_points = min(n_points, len(table) - 1)
        pd = table[n_points]
        if pd == 0:
            close = False
        return pd, close

    def clutter_intensity(self, z: RandomVec, n_z: int) -> float:
        """Clutter intensity over the area seen by the last laser scan."""
        return self._clutter_intensity

    def clutter_intensity_integral(self, n_z: int = 0) -> float:
        """Expected number of clutter measurements."""
        return self.config.expected_clutter_number
import numpy as np
import pytest

from rfsslam.gaussian import RandomVec
from rfsslam.measurement_model import MeasurementModel, Prediction, RangeSensorConfig


class _OffsetModel(MeasurementModel):
    """Measures the landmark position relative to the pose position."""

    def measure(self, pose, landmark):
        z = landmark.mean - pose.mean[:2]
        cov = landmark.cov + self.noise
        return Prediction(RandomVec(z, cov, pose.time), bool(np.linalg.norm(z) <= 5.0),
                          np.eye(2), -np.eye(2, 3))

    def inverse_measure(self, pose, measurement):
        return RandomVec(pose.mean[:2] + measurement.mean, self.noise.copy(), measurement.time)


def test_abstract_base_cannot_be_instantiated():
    with pytest.raises(TypeError):
        MeasurementModel()


def test_default_noise_is_zero():
    model = _OffsetModel()
    assert np.array_equal(model.noise, np.zeros((2, 2)))
    prediction = model.measure(RandomVec([0.0, 0.0, 0.0]), RandomVec([1.0, 2.0]))
    assert np.array_equal(prediction.measurement.cov, np.zeros((2, 2)))


def test_noise_round_trip():
    r = np.diag([0.1, 0.2])
    model = _OffsetModel(r)
    assert np.array_equal(model.noise, r)
    landmark = model.inverse_measure(RandomVec([0.0, 0.0, 0.0]), RandomVec([1.0, 1.0]))
    assert np.array_equal(landmark.cov, r)


def test_noise_with_wrong_shape_is_rejected():
    model = _OffsetModel()
    with pytest.raises(ValueError):
        model.noise = np.eye(3)
    prediction = model.measure(RandomVec([0.0, 0.0, 0.0]), RandomVec([1.0, 0.0]))
    assert np.array_equal(prediction.measurement.cov, np.zeros((2, 2)))


def test_sample_without_noise_matches_measure():
    model = _OffsetModel(np.diag([0.1, 0.1]))
    pose = RandomVec([1.0, 1.0, 0.0])
    landmark = RandomVec([2.0, 3.0])
    sampled, valid = model.sample(pose, landmark, use_additive_noise=False)
    assert valid is True
    assert np.allclose(sampled.mean, model.measure(pose, landmark).measurement.mean)


def test_sample_with_noise_carries_noise_covariance():
    r = np.diag([0.1, 0.3])
    model = _OffsetModel(r)
    pose = RandomVec([0.0, 0.0, 0.0])
    landmark = RandomVec([1.0, 1.0])
    sampled, valid = model.sample(pose, landmark, rng=np.random.default_rng(1))
    assert valid is True
    assert np.array_equal(sampled.cov, r)


def test_sample_is_reproducible_with_seeded_rng():
    model = _OffsetModel(np.diag([0.5, 0.5]))
    pose = RandomVec([0.0, 0.0, 0.0], np.eye(3) * 0.1)
    landmark = RandomVec([1.0, 2.0], np.eye(2) * 0.1)
    first, _ = model.sample(pose, landmark, True, True, True, np.random.default_rng(7))
    second, _ = model.sample(pose, landmark, True, True, True, np.random.default_rng(7))
    assert np.array_equal(first.mean, second.mean)


def test_invalid_measurement_gets_no_noise():
    model = _OffsetModel(np.diag([1.0, 1.0]))
    pose = RandomVec([0.0, 0.0, 0.0])
    landmark = RandomVec([10.0, 0.0])
    sampled, valid = model.sample(pose, landmark, rng=np.random.default_rng(3))
    assert valid is False
    assert np.allclose(sampled.mean, [10.0, 0.0])


def test_default_detection_and_clutter():
    model = _OffsetModel()
    pose = RandomVec([0.0, 0.0, 0.0])
    landmark = RandomVec([1.0, 0.0])
    assert model.probability_of_detection(pose, landmark) == (1.0, False)
    assert model.clutter_intensity(landmark, 3) == 0.0
    assert model.clutter_intensity_integral(3) == 0.0


def test_range_sensor_config_defaults():
    config = RangeSensorConfig()
    assert config.probability_of_detection == 0.95
    assert config.uniform_clutter_intensity == 0.1
    assert (config.range_lim_min, config.range_lim_max, config.range_lim_buffer) == (0.3, 5.0, 0.25)
import numpy as np
import pytest

from rfsslam.gaussian import RandomVec
from rfsslam.measurement_model import RangeSensorConfig
from rfsslam.measurement_rng1d import MeasurementModelRng1D


def test_measure_difference_and_covariance():
    model = MeasurementModelRng1D.from_variance(0.5)
    pose = RandomVec([1.0], [[0.25]])
    lmk = RandomVec([3.0], [[0.125]])
    pred = model.measure(pose, lmk)
    assert pred.measurement.mean[0] == pytest.approx(2.0)
    assert pred.measurement.cov[0, 0] == pytest.approx(0.25 + 0.125 + 0.5)
    assert pred.valid
    assert pred.jacobian_landmark[0, 0] == 1.0
    assert pred.jacobian_pose[0, 0] == -1.0


def test_validity_uses_absolute_distance():
    model = MeasurementModelRng1D()
    assert model.measure(RandomVec([0.0]), RandomVec([-2.0])).valid
    assert not model.measure(RandomVec([0.0]), RandomVec([-6.0])).valid
    assert not model.measure(RandomVec([0.0]), RandomVec([0.1])).valid


def test_inverse_round_trip():
    model = MeasurementModelRng1D.from_variance(0.3)
    pose = RandomVec([-1.5])
    lmk = RandomVec([2.25])
    z = model.measure(pose, lmk).measurement
    back = model.inverse_measure(pose, z)
    np.testing.assert_allclose(back.mean, lmk.mean)
    np.testing.assert_allclose(back.cov, model.noise)


def test_noise_shape_checked():
    with pytest.raises(ValueError):
        MeasurementModelRng1D(np.eye(2))


def test_probability_of_detection():
    cfg = RangeSensorConfig()
    model = MeasurementModelRng1D(config=cfg)
    assert model.probability_of_detection(RandomVec([0.0]), RandomVec([2.0])) == (
        cfg.probability_of_detection, False)
    assert model.probability_of_detection(RandomVec([0.0]), RandomVec([-4.9])) == (
        cfg.probability_of_detection, True)
    assert model.probability_of_detection(RandomVec([0.0]), RandomVec([5.1])) == (0.0, True)
    assert model.probability_of_detection(RandomVec([0.0]), RandomVec([0.1])) == (0.0, True)
    assert model.probability_of_detection(RandomVec([0.0]), RandomVec([8.0])) == (0.0, False)


def test_clutter():
    cfg = RangeSensorConfig(uniform_clutter_intensity=0.3)
    model = MeasurementModelRng1D(config=cfg)
    assert model.clutter_intensity(RandomVec([1.0]), 2) == 0.3
    base = model.clutter_intensity_integral()
    cfg.range_lim_max += cfg.range_lim_max - cfg.range_lim_min
    assert model.clutter_intensity_integral() == pytest.approx(2 * base)
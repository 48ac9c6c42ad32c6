import math

import numpy as np
import pytest

from rfsslam.frame import Frame2d
from rfsslam.gaussian import RandomVec


def _diag_sum(matrix):
    return float(np.diagonal(matrix).sum())


def test_rotation_matrix_is_orthonormal():
    r = Frame2d([1.0, 2.0, 0.8]).rotation_matrix()
    assert r @ r.T == pytest.approx(np.eye(2))
    assert np.linalg.det(r) == pytest.approx(1.0)


def test_quarter_turn_maps_x_axis_to_y_axis():
    frame = Frame2d([0.0, 0.0, math.pi / 2])
    p, cov = frame.to_base([1.0, 0.0])
    assert p == pytest.approx([0.0, 1.0], abs=1e-12)
    assert cov is None


def test_translation_only():
    frame = Frame2d([3.0, -1.0, 0.0])
    p, _ = frame.to_base([1.0, 1.0])
    assert p == pytest.approx([4.0, 0.0])


def test_covariance_rotation_preserves_trace_and_determinant():
    frame = Frame2d([0.5, 0.5, 1.1])
    cov = np.array([[2.0, 0.3], [0.3, 0.5]])
    _, cov_b = frame.to_base([0.0, 0.0], cov)
    assert _diag_sum(cov_b) == pytest.approx(_diag_sum(cov))
    assert np.linalg.det(cov_b) == pytest.approx(np.linalg.det(cov))


def test_composition_with_identity():
    frame = Frame2d([1.0, 2.0, 0.4], None, 3.0)
    out = frame * Frame2d([0.0, 0.0, 0.0])
    assert out.mean == pytest.approx(frame.mean)
    assert out.time == pytest.approx(3.0)


def test_composition_with_inverse_gives_identity():
    x, y, a = 1.5, -0.5, 0.9
    frame = Frame2d([x, y, a])
    c, s = math.cos(a), math.sin(a)
    inverse = Frame2d([-(c * x + s * y), -(-s * x + c * y), -a])
    out = frame * inverse
    assert out.mean == pytest.approx([0.0, 0.0, 0.0], abs=1e-12)


def test_composition_matches_chained_point_transform():
    f_bc = Frame2d([1.0, 0.0, 0.3])
    f_cd = Frame2d([0.0, 2.0, -1.2])
    point = [0.7, -0.4]
    chained, _ = f_bc.to_base(f_cd.to_base(point)[0])
    direct, _ = (f_bc * f_cd).to_base(point)
    assert direct == pytest.approx(chained)


def test_composition_keeps_base_and_latest_time():
    base = Frame2d([0.0, 0.0, 0.0])
    f_bc = Frame2d([1.0, 0.0, 0.0], None, 1.0, base)
    f_cd = Frame2d([0.0, 1.0, 0.0], None, 4.0)
    out = f_bc * f_cd
    assert out.base is base
    assert out.time == pytest.approx(4.0)


def test_random_vec_to_base_keeps_time():
    frame = Frame2d([0.0, 0.0, math.pi])
    point = RandomVec([1.0, 0.0], np.diag([1.0, 2.0]), 7.0)
    out = frame.random_vec_to_base(point)
    assert out.mean == pytest.approx([-1.0, 0.0], abs=1e-12)
    assert out.cov == pytest.approx(np.diag([1.0, 2.0]), abs=1e-12)
    assert out.time == pytest.approx(7.0)


def test_bad_shapes_raise():
    with pytest.raises(ValueError):
        Frame2d([0.0, 0.0])
    with pytest.raises(ValueError):
        Frame2d([0.0, 0.0, 0.0]).to_base([1.0, 2.0, 3.0])
    with pytest.raises(ValueError):
        Frame2d([0.0, 0.0, 0.0]).to_base([1.0, 2.0], np.eye(3))
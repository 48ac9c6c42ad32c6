"""Motion models that step a robot pose forward by one control input."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from rfsslam.gaussian import RandomVec


def _vector(u) -> np.ndarray:
    if isinstance(u, RandomVec):
        return u.mean
    return np.atleast_1d(np.array(u, dtype=float))


@dataclass
class AckermanModel2d:
    """Car-like motion of a point of interest offset from the rear axle.

    ``h`` is the lateral offset of the wheel encoder, ``l`` the wheel base and
    ``dx``, ``dy`` the offset of the tracked point. ``noise`` is the process
    noise covariance.
    """

    h: float = 0.0
    l: float = 1.0
    dx: float = 0.0
    dy: float = 0.0
    noise: np.ndarray = field(default_factory=lambda: np.zeros((3, 3)))

    def __post_init__(self) -> None:
        self.noise = np.array(self.noise, dtype=float)
        if self.noise.shape != (3, 3):
            raise ValueError(f"process noise must be 3x3, got {self.noise.shape}")

    def step(self, pose: RandomVec, control, dt: float) -> RandomVec:
        """Advance ``pose`` by ``control = (velocity, steering)`` over ``dt`` seconds."""
        u = _vector(control)
        if u.shape[0] < 2:
            raise ValueError("control must hold velocity and steering")
        if self.l == 0:
            raise ValueError("wheel base must not be zero")
        velocity, steering = float(u[0]), float(u[1])
        x, y, theta = pose.mean
        c, s = math.cos(theta), math.sin(theta)
        tan_s = math.tan(steering)

        velocity = velocity / (1 - tan_s * self.h / self.l)
        turn = velocity / self.l * tan_s
        delta = np.array([
            dt * (velocity * c - turn * (self.dx * s + self.dy * c)),
            dt * (velocity * s + turn * (self.dx * c - self.dy * s)),
            dt * turn,
        ])
        new = np.array([x, y, theta]) + delta
        if new[2] > math.pi:
            new[2] -= 2 * math.pi
        elif new[2] < -math.pi:
            new[2] += 2 * math.pi
        return RandomVec(new, pose.cov.copy(), pose.time + dt)


def odometry_step_1d(pose: RandomVec, odometry, dt: float) -> RandomVec:
    """Move a 1d ``pose`` by the displacement ``odometry``."""
    u = _vector(odometry)
    if u.shape != pose.mean.shape:
        raise ValueError(f"odometry shape {u.shape} does not match pose {pose.mean.shape}")
    return RandomVec(pose.mean + u, pose.cov.copy(), pose.time + dt)


def odometry_step_2d(pose: RandomVec, odometry, dt: float) -> RandomVec:
    """Move a 2d ``pose`` by ``odometry = (dx, dy, dtheta)`` given in the robot frame."""
    u = _vector(odometry)
    if u.shape[0] != 3 or pose.mean.shape[0] != 3:
        raise ValueError("pose and odometry must both have three entries")
    x, y, theta = pose.mean
    c, s = math.cos(theta), math.sin(theta)
    world_to_robot = np.array([[c, s], [-s, c]])
    cu, su = math.cos(u[2]), math.sin(u[2])
    step_rot = np.array([[cu, su], [-su, cu]])

    position = np.array([x, y]) + world_to_robot.T @ u[:2]
    rot = step_rot @ world_to_robot
    heading = math.atan2(rot[0, 1], rot[0, 0])
    return RandomVec([position[0], position[1], heading], pose.cov.copy(), pose.time + dt)
"""Linear assignment, Gaussian tools, and sensor, motion and frame models for random-finite-set SLAM."""

__version__ = "0.1.0"
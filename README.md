# rfsslam

Building blocks for random-finite-set SLAM in Python. It covers linear assignment for data association and Gaussian random vectors. It also provides sensor measurement models, motion models and 2-D coordinate frames.

The package is a library. It has no command-line tool.

## Installation

```
pip install .
```

To run the tests, install the test extra:

```
pip install .[test]
pytest
```

## Modules

### Assignment

- **`rfsslam.hungarian`**
  - `solve(cost, maximize=True, debug=False)` solves a square assignment problem with the Hungarian method.
  - It returns `(assignment, total)`, where `assignment[row]` is the column given to `row`.
  - It maximises the total score, or minimises it when `maximize=False`.
  - The input matrix is left unchanged.
  - `debug=True` prints the working.
  - If no alternating path can be found, it raises `AssignmentError`.
- **`rfsslam.permutation`**
  - `lexicographic_permutations(n_m, n_z, include_clutter=False)` yields, in lexicographic order, assignments of `n_m` landmarks to `n_z` measurements.
  - The value `n_z` marks a landmark with no measurement.
  - Clutter entries are always included when `n_m != n_z`.
- **`rfsslam.cost_matrix`**
  - `CostMatrixGeneral` is a rectangular matrix.
    - `partition()` splits it into independent blocks by the connected components of its non-zero entries.
    - `partition_size(p)` gives the size of block `p`.
    - `get_partition(p, extended=False)` returns block `p` as a `Partition`, holding the block matrix, its row and column indices and an `is_zero` flag.
  - `CostMatrix` is a square matrix.
    - `reduce(lim, min_val=False)` clamps ruled-out entries to `lim` and fixes rows that have only one possible column.
    - `reduced()` returns the resulting `ReducedCostMatrix`.
  - `solve_cost_matrix(cost_matrix, maximize=True)` solves the reduced problem when one exists. Otherwise it solves the full matrix.

### Gaussian random vectors

`rfsslam.gaussian` provides the following:

- `RandomVec(mean, cov=None, time=0.0)` is a Gaussian random vector.
  - Its properties are `n_dim`, `cov_det`, `cov_inv` and `cov_cholesky_lower`.
  - `sample(rng=None)` draws from it.
- `mahalanobis_dist2(x_fm, x_to)` and `mahalanobis_dist(x_fm, x_to)` measure distance scaled by the covariance of `x_fm`.
- `gaussian_likelihood(gaussian, x_eval)` gives the Gaussian density at a point. It returns 0 where the value is not a number.

### Measurement models

All models derive from `rfsslam.measurement_model.MeasurementModel` and share these methods:

- `measure(pose, landmark)` returns a `Prediction`. It holds the predicted measurement, a `valid` flag and the Jacobians with respect to landmark and pose.
- `sample(...)` draws a noisy measurement.
- `inverse_measure(pose, measurement)` returns the landmark implied by a measurement.
- `probability_of_detection(pose, landmark)` returns `(probability, close_to_sensing_limit)`.
- `clutter_intensity(z, n_z)` and `clutter_intensity_integral(n_z)` describe clutter.

Each model takes its noise covariance through the `noise` property.

| Model | Module | Measurement |
| --- | --- | --- |
| `MeasurementModelXY` | `rfsslam.measurement_xy` | landmark x-y in the robot frame |
| `MeasurementModelRngBrg` | `rfsslam.measurement_rngbrg` | range and bearing of a 2-D point |
| `MeasurementModelRng1D` | `rfsslam.measurement_rng1d` | signed distance along a line |
| `MeasurementModelVictoriaPark` | `rfsslam.measurement_victoria_park` | range, bearing and diameter of a circular landmark seen by a laser scanner |

- The first three models are configured with `RangeSensorConfig`.
- The laser model is configured with `VictoriaParkConfig`.
  - Its detection probability depends on the beams of the scan last given to `set_laser_scan`.

### Innovation, motion and frames

- **`rfsslam.innovation.RangeBearingInnovation`**
  - `calculate(z_exp, z_act)` returns `(innovation, accepted)`.
  - The bearing is wrapped into `[-pi, pi]`.
  - Optional range and bearing thresholds gate the result.
- **`rfsslam.process_models`**
  - `AckermanModel2d.step(pose, control, dt)` steps a car-like model.
  - `odometry_step_1d(pose, odometry, dt)` and `odometry_step_2d(pose, odometry, dt)` apply odometry.
- **`rfsslam.frame.Frame2d`** is a 2-D frame relative to a base frame.
  - `a * b` composes two frames.
  - `rotation_matrix()` returns the frame's rotation.
  - `to_base(point, cov=None)` and `random_vec_to_base(point)` move points into the base frame.

## Example

```python
import numpy as np
from rfsslam.hungarian import solve

scores = np.array([[3.0, 1.0, 2.0],
                   [2.0, 4.0, 1.0],
                   [1.0, 2.0, 5.0]])

assignment, total = solve(scores, maximize=True)  # [0, 1, 2], 12.0
```

```python
import numpy as np
from rfsslam.gaussian import RandomVec
from rfsslam.measurement_rngbrg import MeasurementModelRngBrg

model = MeasurementModelRngBrg.from_variances(0.01, 0.001)
pose = RandomVec([0.0, 0.0, 0.0])
landmark = RandomVec([3.0, 4.0], 0.1 * np.eye(2))

prediction = model.measure(pose, landmark)
prediction.measurement.mean  # range 5.0, bearing atan2(4, 3)
prediction.valid             # True: within the default 0.3 to 5.0 range limits
```

## What the package does not do

- Among assignment solvers it finds only the single best assignment. It neither ranks the next-best assignments nor lists every assignment with its score.
- It does not compute matrix permanents.
- It holds no complete SLAM filter. There is no particle filter, no PHD filter and no map management, and no reading of datasets.
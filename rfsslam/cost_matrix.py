"""Cost matrices that can be split into independent blocks or reduced before assignment."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from rfsslam.hungarian import solve


@dataclass(frozen=True)
class Partition:
    """A block of a cost matrix formed by one connected component of its non-zero entries.

    ``rows`` and ``cols`` give the indices in the full matrix of the block's rows
    and columns. ``is_zero`` marks the block that gathers every row and column
    with no non-zero entry at all.
    """

    matrix: np.ndarray
    rows: tuple[int, ...]
    cols: tuple[int, ...]
    is_zero: bool


@dataclass(frozen=True)
class ReducedCostMatrix:
    """The part of a square cost matrix left to solve after obvious pairings are fixed.

    ``fixed[row]`` is the column forced on ``row``, or -1 when the row is still
    free. ``rows`` and ``cols`` map indices of ``matrix`` back to the full matrix.
    """

    matrix: np.ndarray
    fixed: tuple[int, ...]
    fixed_score: float
    rows: tuple[int, ...]
    cols: tuple[int, ...]

    @property
    def size(self) -> int:
        """Dimension of the square matrix that still has to be solved."""
        return len(self.rows)


class _DisjointSet:
    def __init__(self, n: int) -> None:
        self._parent = list(range(n))

    def find(self, v: int) -> int:
        root = v
        while self._parent[root] != root:
            root = self._parent[root]
        while self._parent[v] != root:
            self._parent[v], v = root, self._parent[v]
        return root

    def union(self, a: int, b: int) -> None:
        ra, rb = self.find(a), self.find(b)
        if ra != rb:
            self._parent[max(ra, rb)] = min(ra, rb)


class CostMatrixGeneral:
    """A rectangular cost matrix that can be partitioned by connected components."""

    def __init__(self, cost) -> None:
        matrix = np.array(cost, dtype=float)
        if matrix.ndim == 1 and matrix.size == 0:
            matrix = matrix.reshape(0, 0)
        if matrix.ndim != 2:
            raise ValueError(f"cost matrix must be two-dimensional, got shape {matrix.shape}")
        self._matrix = matrix
        self._components: list[tuple[list[int], list[int]]] | None = None
        self._zero_index = -1

    @property
    def matrix(self) -> np.ndarray:
        """The cost matrix held by this object."""
        return self._matrix

    @property
    def shape(self) -> tuple[int, int]:
        return self._matrix.shape

    def partition(self) -> int:
        """Split the matrix into independent blocks and return how many there are.

        Rows and columns are linked wherever their entry is non-zero. Rows or
        columns with no link at all are gathered into a single block.
        """
        if self._components is not None:
            return len(self._components)

        n_rows, n_cols = self._matrix.shape
        sets = _DisjointSet(n_rows + n_cols)
        for i, j in zip(*np.nonzero(self._matrix)):
            sets.union(int(i), n_rows + int(j))

        label: dict[int, int] = {}
        raw: list[tuple[list[int], list[int]]] = []
        for v in range(n_rows + n_cols):
            root = sets.find(v)
            if root not in label:
                label[root] = len(raw)
                raw.append(([], []))
            rows, cols = raw[label[root]]
            if v < n_rows:
                rows.append(v)
            else:
                cols.append(v - n_rows)

        components: list[tuple[list[int], list[int]]] = []
        zero_index = -1
        for rows, cols in raw:
            if rows and cols:
                components.append((rows, cols))
            elif zero_index == -1:
                zero_index = len(components)
                components.append((list(rows), list(cols)))
            else:
                zero_rows, zero_cols = components[zero_index]
                zero_rows.extend(rows)
                zero_cols.extend(cols)

        self._components = components
        self._zero_index = zero_index
        return len(components)

    def _component(self, p: int) -> tuple[list[int], list[int]]:
        self.partition()
        assert self._components is not None
        if not 0 <= p < len(self._components):
            raise IndexError(f"partition index {p} out of range")
        return self._components[p]

    def partition_size(self, p: int) -> tuple[int, int]:
        """Return ``(rows, columns)`` of partition ``p``."""
        rows, cols = self._component(p)
        return len(rows), len(cols)

    def get_partition(self, p: int, extended: bool = False) -> Partition:
        """Return partition ``p`` as its own matrix.

        With ``extended`` the matrix is square with side ``rows + columns``;
        the block sits in its top-left corner and the rest is zero.
        """
        rows, cols = self._component(p)
        block = self._matrix[np.ix_(rows, cols)] if rows and cols else np.zeros((len(rows), len(cols)))
        if extended:
            side = len(rows) + len(cols)
            matrix = np.zeros((side, side))
            matrix[: len(rows), : len(cols)] = block
        else:
            matrix = np.array(block, dtype=float)
        return Partition(matrix=matrix, rows=tuple(rows), cols=tuple(cols),
                         is_zero=p == self._zero_index)


class CostMatrix(CostMatrixGeneral):
    """A square cost matrix that can be reduced by fixing unambiguous pairings."""

    def __init__(self, cost) -> None:
        super().__init__(cost)
        n_rows, n_cols = self._matrix.shape
        if n_rows != n_cols:
            raise ValueError(f"cost matrix must be square, got shape {self._matrix.shape}")
        self._reduced: ReducedCostMatrix | None = None

    @property
    def is_reduced(self) -> bool:
        return self._reduced is not None

    def reduce(self, lim: float, min_val: bool = False) -> None:
        """Clamp entries beyond ``lim`` to ``lim`` and fix rows with a single possible column.

        An entry is ruled out when it is at or above ``lim`` (or at or below it
        when ``min_val`` is true). A row whose only remaining entry lies in a
        column with no other remaining entry is paired with that column.
        """
        c = self._matrix
        n = c.shape[0]
        excluded = c <= lim if min_val else c >= lim
        c[excluded] = lim
        valid = ~excluded
        row_counts = valid.sum(axis=1)
        col_counts = valid.sum(axis=0)

        fixed = [-1] * n
        fixed_cols: set[int] = set()
        for i in range(n):
            if row_counts[i] == 1:
                j = int(np.flatnonzero(valid[i])[0])
                if col_counts[j] == 1:
                    fixed[i] = j
                    fixed_cols.add(j)

        rows = [i for i in range(n) if fixed[i] == -1]
        cols = [j for j in range(n) if j not in fixed_cols]
        if len(rows) == 1:
            fixed[rows[0]] = cols[0]
            rows, cols = [], []

        matrix = c[np.ix_(rows, cols)].copy() if rows else np.zeros((0, 0))
        fixed_score = float(sum(c[i, j] for i, j in enumerate(fixed) if j != -1))
        self._reduced = ReducedCostMatrix(matrix=matrix, fixed=tuple(fixed),
                                          fixed_score=fixed_score,
                                          rows=tuple(rows), cols=tuple(cols))

    def reduced(self) -> ReducedCostMatrix:
        """Return the result of the last :meth:`reduce`."""
        if self._reduced is None:
            raise RuntimeError("cost matrix has not been reduced")
        return self._reduced


def solve_cost_matrix(cost_matrix: CostMatrix, maximize: bool = True) -> tuple[list[int], float]:
    """Solve the assignment for ``cost_matrix``, using its reduction when available.

    Returns ``(assignment, total)`` as :func:`rfsslam.hungarian.solve` does.
    """
    if not cost_matrix.is_reduced:
        return solve(cost_matrix.matrix, maximize)

    reduced = cost_matrix.reduced()
    assignment = list(reduced.fixed)
    if reduced.size == 0:
        return assignment, reduced.fixed_score

    solution, score = solve(reduced.matrix, maximize)
    for k, col in enumerate(solution):
        assignment[reduced.rows[k]] = reduced.cols[col]
    return assignment, reduced.fixed_score + score
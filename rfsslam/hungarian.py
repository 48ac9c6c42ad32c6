"""Hungarian method for square linear assignment problems, O(n^3)."""

from __future__ import annotations

from collections import deque
from typing import Sequence

import numpy as np

_TIGHT = 1e-14
_BFS_TIGHT = 1e-12


class AssignmentError(RuntimeError):
    """Raised when the Hungarian method cannot complete an assignment."""


def _as_square(cost) -> np.ndarray:
    matrix = np.array(cost, dtype=float)
    if matrix.size == 0 and matrix.ndim == 1:
        return matrix.reshape(0, 0)
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise ValueError(f"cost matrix must be square, got shape {matrix.shape}")
    if not np.all(np.isfinite(matrix)):
        raise ValueError("cost matrix must contain only finite values")
    return matrix


def _print_matrix(title: str, matrix: np.ndarray, fmt: str) -> None:
    print(title)
    for row in matrix:
        print("".join(f"{value:{fmt}}   " for value in row))


def _print_sets(s: np.ndarray, t: np.ndarray, ns: np.ndarray, indent: str = "") -> None:
    print(indent + "S = { " + "".join(f"x[{x}] " for x in np.flatnonzero(s)) + " }")
    print(indent + "T = { " + "".join(f"y[{y}] " for y in np.flatnonzero(t)) + " }")
    print(indent + "NS = { " + "".join(f"y[{y}] " for y in np.flatnonzero(ns)) + " }")


def _print_matching(xy: list[int], yx: list[int]) -> None:
    for x, y in enumerate(xy):
        print(f"  x[{x}] ----- y[{y}]" if y != -1 else f"  x[{x}] -----      ")
    for y, x in enumerate(yx):
        print(f"  y[{y}] ----- x[{x}]" if x != -1 else f"  y[{y}] -----      ")


def _augment(
    c: np.ndarray,
    lx: np.ndarray,
    ly: np.ndarray,
    s: np.ndarray,
    xy: list[int],
    yx: list[int],
    root: int,
    free_y: int,
    debug: bool,
) -> bool:
    """Breadth-first search for an alternating path from root to free_y and flip it.

    X vertices are numbered 0..n-1 and Y vertices n..2n-1 within the search.
    """
    n = len(xy)
    target = free_y + n
    parent = [-1] * (2 * n)
    x_queued = [False] * n
    y_queued = [False] * n
    x_queued[root] = True
    queue = deque([root])

    while queue:
        node = queue[0]
        if debug:
            label = f"x[{node}]" if node < n else f"y[{node - n}]"
            print(f"Breadth first search queue front: {label}")

        if node == target:
            path = [f"y[{node - n}]"]
            while node != root:
                if node >= n:
                    x_parent = parent[node]
                    xy[x_parent] = node - n
                    yx[node - n] = x_parent
                node = parent[node]
                path.append(f"x[{node}]" if node < n else f"y[{node - n}]")
            if debug:
                print("  Augmentation path found:\n    " + " --- ".join(path))
                print("Current pairing")
                _print_matching(xy, yx)
            return True

        queue.popleft()
        if node < n:
            for y in range(n):
                if (
                    abs(lx[node] + ly[y] - c[node, y]) < _BFS_TIGHT
                    and not y_queued[y]
                    and xy[node] != y
                ):
                    if debug:
                        print(
                            f"Breadth first search inserting y[{y}] in queue "
                            f"with parent x[{node}]"
                        )
                    y_queued[y] = True
                    parent[y + n] = node
                    queue.append(y + n)
        else:
            y = node - n
            for x in range(n):
                if (
                    abs(lx[x] + ly[y] - c[x, y]) < _BFS_TIGHT
                    and s[x]
                    and not x_queued[x]
                    and yx[y] == x
                ):
                    if debug:
                        print(
                            f"Breadth first search inserting x[{x}] in queue "
                            f"with parent y[{y}]"
                        )
                    x_queued[x] = True
                    parent[x] = node
                    queue.append(x)
    return False


def _initial_matching(c: np.ndarray, lx: np.ndarray, xy: list[int], yx: list[int]) -> None:
    """Label each row with its largest entry and greedily match rows to columns."""
    for x, row in enumerate(c):
        lx[x] = 0.0
        for y, value in enumerate(row):
            if value >= lx[x]:
                lx[x] = value
                xy[x] = y
        y = xy[x]
        other = yx[y]
        if other == -1:
            yx[y] = x
        elif row[y] > c[other, y]:
            xy[other] = -1
            yx[y] = x
        else:
            xy[x] = -1


def solve(cost: Sequence[Sequence[float]] | np.ndarray, maximize: bool = True,
          debug: bool = False) -> tuple[list[int], float]:
    """Solve the square assignment problem given by ``cost``.

    Returns ``(assignment, total)`` where ``assignment[row]`` is the column
    assigned to ``row`` and ``total`` is the summed score of that assignment.
    The total score is maximised, or minimised when ``maximize`` is false.
    The input is not modified. With ``debug`` the working is printed.
    """
    original = _as_square(cost)
    n = original.shape[0]

    c = original.copy() if maximize else -original
    offset = min(0.0, float(c.min())) if n else 0.0
    c = c - offset

    if debug:
        _print_matrix("Score / Cost Matrix:", c, "f")

    lx = np.zeros(n)
    ly = np.zeros(n)
    xy = [-1] * n
    yx = [-1] * n
    _initial_matching(c, lx, xy, yx)

    if debug:
        print("Initial labeling:")
        for i in range(n):
            print(f"  lx[{i}] = {lx[i]:f}     ly[{i}] = {ly[i]:f}")
        print("Initial matching:")
        _print_matching(xy, yx)
        _print_matrix("Initial Slack Table:", lx[:, None] + ly[None, :] - c, "e")

    s = np.zeros(n, dtype=bool)
    t = np.zeros(n, dtype=bool)
    ns = np.zeros(n, dtype=bool)
    slack = np.zeros(n)
    root = -1
    pick_free_vertex = True

    while True:
        # Step 2: stop on a perfect matching, otherwise root a new tree at a free x.
        if pick_free_vertex:
            s[:] = False
            t[:] = False
            ns[:] = False
            root = next((x for x in range(n) if xy[x] == -1), -1)
            if root == -1:
                total = float(sum(original[x, y] for x, y in enumerate(xy)))
                return list(xy), total
            s[root] = True
            slack[:] = lx[root] + ly - c[root]
            if debug:
                print("Slack:")
                for y, value in enumerate(slack):
                    print(f"    s[{y}] = {value:f}")
            tight = np.abs(slack) < _TIGHT
            slack[tight] = 0.0
            ns[tight] = True
            if debug:
                print("New root selected")
                _print_sets(s, t, ns)

        # Step 3: when N(S) == T, update labels so the neighbourhood grows.
        if np.array_equal(ns, t):
            if debug:
                _print_matrix("Slack Table:", lx[:, None] + ly[None, :] - c, "e")
            outside = ~t
            delta = float(slack[outside].min()) if outside.any() else float("inf")
            if debug:
                print("Update labels:")
                print(f"  minimum slack of !T = {delta:f}")
            lx[s] -= delta
            ly[t] += delta
            slack[outside] -= delta
            ns[slack == 0] = True
            if debug:
                for i in range(n):
                    print(f"  lx[{i}] = {lx[i]:f}     ly[{i}] = {ly[i]:f}")
                print("  Update slack variables:")
                for y, value in enumerate(slack):
                    print(f"    s[{y}] = {value:f}")

        # Step 4: pick y in N(S) \ T.
        y = next((j for j in range(n) if ns[j] and not t[j]), -1)
        if y == -1:
            raise AssignmentError("no vertex left in the equality graph neighbourhood")
        x_t = yx[y]
        if x_t == -1:
            if debug:
                print(f"  Found free y[{y}]")
            if not _augment(c, lx, ly, s, xy, yx, root, y, debug):
                raise AssignmentError("Cannot find alternating path")
            pick_free_vertex = True
        else:
            if debug:
                print(f"  Found y[{y}] matched with x[{x_t}]")
            s[x_t] = True
            t[y] = True
            row_slack = lx[x_t] + ly - c[x_t]
            ns[np.abs(row_slack) < _TIGHT] = True
            if debug:
                _print_sets(s, t, ns, indent="  ")
            np.minimum(slack, row_slack, out=slack)
            pick_free_vertex = False
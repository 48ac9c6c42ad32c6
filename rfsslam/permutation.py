"""Lexicographic enumeration of landmark-to-measurement assignments."""

from __future__ import annotations

from typing import Iterator


def _next_permutation(seq: list[int]) -> bool:
    """Advance ``seq`` in place to the next lexicographic permutation.

    Returns False (leaving ``seq`` sorted ascending) when ``seq`` was the last one.
    """
    i = len(seq) - 2
    while i >= 0 and seq[i] >= seq[i + 1]:
        i -= 1
    if i < 0:
        seq.reverse()
        return False
    j = len(seq) - 1
    while seq[j] <= seq[i]:
        j -= 1
    seq[i], seq[j] = seq[j], seq[i]
    seq[i + 1:] = reversed(seq[i + 1:])
    return True


def lexicographic_permutations(n_m: int, n_z: int,
                               include_clutter: bool = False) -> Iterator[tuple[int, ...]]:
    """Yield assignments of ``n_m`` landmarks to ``n_z`` measurements in lexicographic order.

    Each yielded tuple's first ``n_m`` entries give the measurement index for
    each landmark; the value ``n_z`` marks a landmark with no measurement.
    When clutter is included (always so when ``n_m != n_z``) the tuple has
    ``n_m + n_z`` entries, the tail holding the unused indices; otherwise it
    has ``n_m`` entries. Orderings that differ only in the tail are skipped.
    """
    if n_m < 0 or n_z < 0:
        raise ValueError("counts must be non-negative")
    if n_m != n_z:
        include_clutter = True
    size = n_m + n_z if include_clutter else n_m
    order = [i if i < n_z else n_z for i in range(size)]

    while True:
        yield tuple(order)
        # Jump past every ordering of the tail, which the assignment does not see.
        order[n_m:] = reversed(order[n_m:])
        if not _next_permutation(order):
            return
"""Orderings of subsets of sibling leaf names."""

from __future__ import annotations

from collections.abc import Sequence
from itertools import combinations, permutations


def full_permutation(names: Sequence[str]) -> list[list[str]]:
    """Every ordering of every proper, non-empty subset of ``names``.

    Subset sizes run from 1 to ``len(names) - 1``: the full set is not
    included. Output follows combination order (lexicographic over input
    positions), then permutation order, the first ordering of each
    combination being the input order.

    >>> full_permutation(["a", "b", "c"])[:5]
    [['a'], ['b'], ['c'], ['a', 'b'], ['b', 'a']]
    """
    results: list[list[str]] = []
    # TODO: decide whether the full set of leaves (size N) should be offered too;
    # shells currently cannot complete "a,b,c" in one go for three leaves.
    for k in range(1, len(names)):
        for indexes in combinations(range(len(names)), k):
            subset = [names[i] for i in indexes]
            for ordering in permutations(subset):
                results.append(list(ordering))
    return results

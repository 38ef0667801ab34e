"""Built-in exclusion presets.

Each preset ignores history; the previous vertex alone decides what is
forbidden. Before the first pick every vertex is allowed.
"""

from __future__ import annotations

from collections.abc import Iterable

from ngonchaos.engine.registry import rule

NO_ADJACENT_OFFSETS = (-1, 0, 1)
NO_NEIGHBORS_OFFSETS = (-1, 1)


def forbidden_by_offsets(previous: int, offsets: Iterable[int], n: int) -> set[int]:
    """1-based indices reached from ``previous`` by each offset, wrapping mod N."""
    return {((previous - 1 + off) % n) + 1 for off in offsets}


def allowed_by_offsets(previous: int | None, offsets: Iterable[int], n: int) -> list[int]:
    if previous is None:
        return list(range(1, n + 1))
    forbidden = forbidden_by_offsets(previous, offsets, n)
    return [i for i in range(1, n + 1) if i not in forbidden]


@rule(name="none", description="Any vertex may follow any other")
def no_rule(previous: int | None, history: tuple[int, ...], n: int) -> list[int]:
    return list(range(1, n + 1))


@rule(name="noRepeat", description="The previous vertex cannot be picked again")
def no_repeat(previous: int | None, history: tuple[int, ...], n: int) -> list[int]:
    return allowed_by_offsets(previous, (0,), n)


@rule(name="noAdjacent", description="Forbid the previous vertex and both of its neighbors")
def no_adjacent(previous: int | None, history: tuple[int, ...], n: int) -> list[int]:
    return allowed_by_offsets(previous, NO_ADJACENT_OFFSETS, n)


@rule(name="noNeighbors", description="Forbid both neighbors of the previous vertex, but not the vertex itself")
def no_neighbors(previous: int | None, history: tuple[int, ...], n: int) -> list[int]:
    return allowed_by_offsets(previous, NO_NEIGHBORS_OFFSETS, n)

"""Edge derivation for each topology kind.

Edges follow from the topology kind and the device count alone; geometry is
never consulted.  Every rule emits unordered index pairs, and the shared
``_EdgeSet`` drops self-loops and repeated pairs so rules can be written
naively (e.g. a ring of two visits the same pair twice).
"""

from __future__ import annotations

from typing import Callable, Iterator, Sequence

from ..config import LayoutConfig
from ..core.device import Device
from ..core.errors import ConfigurationError
from ..core.topology import Edge, NodeLayout, RandomSource, TopologyKind
from .positions import HYBRID_INNER_SIZE, HYBRID_OUTER_START, grid_side

Pairs = Iterator[tuple[int, int]]


class _EdgeSet:
    """Ordered, de-duplicated edge accumulator."""

    def __init__(self, devices: Sequence[Device], config: LayoutConfig) -> None:
        self.devices = devices
        self.risk_statuses = config.risk_statuses
        self.edges: list[Edge] = []
        self._seen: set[tuple[int, int]] = set()

    def add(self, i: int, j: int) -> None:
        if i == j:
            return
        pair = (min(i, j), max(i, j))
        if pair in self._seen:
            return
        self._seen.add(pair)
        risk = (
            self.devices[i].is_flagged(self.risk_statuses)
            or self.devices[j].is_flagged(self.risk_statuses)
        )
        self.edges.append(Edge(pair[0], pair[1], risk))


def star_pairs(n: int, config: LayoutConfig, rng: RandomSource | None) -> Pairs:
    for i in range(1, n):
        yield (0, i)


def ring_pairs(n: int, config: LayoutConfig, rng: RandomSource | None) -> Pairs:
    if n < 2:
        return
    for i in range(n):
        yield (i, (i + 1) % n)


def grid_pairs(n: int, config: LayoutConfig, rng: RandomSource | None) -> Pairs:
    """4-neighbour lattice adjacency, no wraparound."""
    side = grid_side(n)
    for i in range(n):
        if (i + 1) % side != 0 and i + 1 < n:
            yield (i, i + 1)
        if i + side < n:
            yield (i, i + side)


def mesh_pairs(n: int, config: LayoutConfig, rng: RandomSource | None) -> Pairs:
    """Sample each unordered pair independently.

    Pairs are visited in row-major order ``(0, 1), (0, 2), ..., (1, 2), ...``
    and one draw is consumed per pair, so a given seed always yields the
    same graph for the same device count.
    """
    p = config.mesh_link_probability
    for i in range(n):
        for j in range(i + 1, n):
            if rng.random() < p:
                yield (i, j)


def hybrid_pairs(n: int, config: LayoutConfig, rng: RandomSource | None) -> Pairs:
    inner = min(HYBRID_INNER_SIZE, n - 1)
    for i in range(1, inner + 1):
        yield (0, i)
    for i in range(HYBRID_OUTER_START, n):
        nxt = i + 1 if i + 1 < n else HYBRID_OUTER_START
        yield (i, nxt)
        yield (i, 1 + i % HYBRID_INNER_SIZE)


RULES: dict[TopologyKind, Callable[[int, LayoutConfig, RandomSource | None], Pairs]] = {
    TopologyKind.STAR: star_pairs,
    TopologyKind.RING: ring_pairs,
    TopologyKind.GRID: grid_pairs,
    TopologyKind.MESH: mesh_pairs,
    TopologyKind.HYBRID: hybrid_pairs,
}


def compute_edges(
    kind: TopologyKind | str,
    devices: Sequence[Device],
    layout: Sequence[NodeLayout],
    rng: RandomSource | None = None,
    config: LayoutConfig | None = None,
) -> list[Edge]:
    """Derive the edge set for *devices* arranged as *kind*.

    Each edge is flagged as risky when either endpoint's status is in
    ``config.risk_statuses``.

    Raises:
        ConfigurationError: If *kind* is unknown, if *kind* is mesh and no
            *rng* is given, or if *layout* was not computed for *devices*.
    """
    kind = TopologyKind.parse(kind)
    config = config or LayoutConfig()
    if kind is TopologyKind.MESH and rng is None:
        raise ConfigurationError(
            "Mesh topology requires an explicit random source "
            "(e.g. numpy.random.default_rng(seed))"
        )
    n = len(devices)
    if len(layout) != n:
        raise ConfigurationError(
            f"Layout has {len(layout)} nodes but {n} devices were given"
        )

    edges = _EdgeSet(devices, config)
    for i, j in RULES[kind](n, config, rng):
        edges.add(i, j)
    return edges.edges

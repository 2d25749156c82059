"""Topology kinds and the value types produced by the layout engine.

Positions and edges are plain immutable values: once returned they are
snapshots, never live views onto engine state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

import numpy as np

from .errors import ConfigurationError

Position = tuple[float, float, float]


class RandomSource(Protocol):
    """Seedable source of floats in ``[0, 1)``.

    Satisfied by :class:`numpy.random.Generator` and :class:`random.Random`.
    ``random()`` is the single ``next()``-style draw of the random source
    contract, named so that both of those work unwrapped.
    """

    def random(self) -> float: ...


class TopologyKind(str, Enum):
    STAR = "star"
    RING = "ring"
    GRID = "grid"
    MESH = "mesh"
    HYBRID = "hybrid"

    @classmethod
    def parse(cls, kind: Any) -> TopologyKind:
        """Coerce *kind* (enum member or case-insensitive name) to a member."""
        if isinstance(kind, cls):
            return kind
        if isinstance(kind, str):
            try:
                return cls(kind.strip().lower())
            except ValueError:
                pass
        raise ConfigurationError(
            f"Unknown topology kind {kind!r}; expected one of "
            f"{', '.join(k.value for k in cls)}"
        )


@dataclass(frozen=True)
class NodeLayout:
    """Position assigned to the device at ``index`` of the input list."""

    index: int
    device_id: str
    position: Position


@dataclass(frozen=True)
class Edge:
    """Unordered link between two device indices (stored ``source < target``)."""

    source: int
    target: int
    risk: bool = False

    @property
    def pair(self) -> tuple[int, int]:
        return (self.source, self.target)


@dataclass(frozen=True)
class Topology:
    """Snapshot of one engine invocation: node positions plus edges."""

    kind: TopologyKind
    nodes: tuple[NodeLayout, ...]
    edges: tuple[Edge, ...]
    _neighbors: dict[int, tuple[int, ...]] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        adj: dict[int, list[int]] = {node.index: [] for node in self.nodes}
        for e in self.edges:
            adj[e.source].append(e.target)
            adj[e.target].append(e.source)
        object.__setattr__(
            self, "_neighbors", {i: tuple(sorted(n)) for i, n in adj.items()}
        )

    def __len__(self) -> int:
        return len(self.nodes)

    def positions(self) -> np.ndarray:
        """Node positions as an ``(n, 3)`` float array."""
        return np.array(
            [node.position for node in self.nodes], dtype=float
        ).reshape(len(self.nodes), 3)

    def neighbors(self, index: int) -> tuple[int, ...]:
        return self._neighbors.get(index, ())

    def degree(self, index: int) -> int:
        return len(self.neighbors(index))

    def risky_edges(self) -> list[Edge]:
        return [e for e in self.edges if e.risk]

    def adjacency_matrix(self) -> np.ndarray:
        """Symmetric boolean adjacency matrix of shape ``(n, n)``."""
        n = len(self.nodes)
        adj = np.zeros((n, n), dtype=bool)
        for e in self.edges:
            adj[e.source, e.target] = True
            adj[e.target, e.source] = True
        return adj

    def to_dict(self) -> dict[str, Any]:
        """JSON-serialisable representation for renderers and exports."""
        return {
            "kind": self.kind.value,
            "nodes": [
                {
                    "index": node.index,
                    "id": node.device_id,
                    "position": list(node.position),
                }
                for node in self.nodes
            ],
            "edges": [
                {"source": e.source, "target": e.target, "risk": e.risk}
                for e in self.edges
            ],
        }

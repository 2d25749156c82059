"""Topology engine — binds a layout config to the placement and edge rules."""

from __future__ import annotations

import logging
from typing import Sequence

from ..config import LayoutConfig
from ..core.device import Device
from ..core.topology import Edge, NodeLayout, RandomSource, Topology, TopologyKind
from .edges import compute_edges
from .positions import compute_layout

logger = logging.getLogger(__name__)


class TopologyEngine:
    """Stateless layout engine.

    The only thing an engine holds is its immutable :class:`LayoutConfig`,
    so one instance can be shared freely between threads.  Each call is a
    full recomputation from its arguments.
    """

    def __init__(self, config: LayoutConfig | None = None) -> None:
        self.config = config or LayoutConfig()

    def compute_layout(
        self,
        kind: TopologyKind | str,
        devices: Sequence[Device],
    ) -> list[NodeLayout]:
        return compute_layout(kind, devices, self.config)

    def compute_edges(
        self,
        kind: TopologyKind | str,
        devices: Sequence[Device],
        layout: Sequence[NodeLayout],
        rng: RandomSource | None = None,
    ) -> list[Edge]:
        return compute_edges(kind, devices, layout, rng=rng, config=self.config)

    def build(
        self,
        kind: TopologyKind | str,
        devices: Sequence[Device],
        rng: RandomSource | None = None,
    ) -> Topology:
        """Compute positions and edges in one go.

        Returns an immutable :class:`Topology` snapshot.  *rng* is required
        for mesh and ignored otherwise.
        """
        kind = TopologyKind.parse(kind)
        devices = tuple(devices)
        layout = self.compute_layout(kind, devices)
        edges = self.compute_edges(kind, devices, layout, rng=rng)
        logger.debug(
            f"Built {kind.value} topology: {len(layout)} nodes, "
            f"{len(edges)} edges ({sum(e.risk for e in edges)} at risk)"
        )
        return Topology(kind=kind, nodes=tuple(layout), edges=tuple(edges))

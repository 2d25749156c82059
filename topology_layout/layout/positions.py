"""Node placement for each topology kind.

Every placement function maps a device count to an ``(n, 3)`` coordinate
array.  Degenerate counts (0 and 1) are handled explicitly so that no
formula ever divides by ``n - 1`` or ``n - 4`` when those are zero.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Sequence

import numpy as np

from ..config import LayoutConfig
from ..core.device import Device
from ..core.topology import NodeLayout, TopologyKind

logger = logging.getLogger(__name__)

# Hybrid tier sizes: root is index 0, inner ring is indices 1..3.
HYBRID_INNER_SIZE = 3
HYBRID_OUTER_START = 1 + HYBRID_INNER_SIZE


def _empty() -> np.ndarray:
    return np.zeros((0, 3), dtype=float)


def _circle(angles: np.ndarray, radius: float, z: np.ndarray | float = 0.0) -> np.ndarray:
    pts = np.empty((len(angles), 3), dtype=float)
    pts[:, 0] = radius * np.cos(angles)
    pts[:, 1] = radius * np.sin(angles)
    pts[:, 2] = z
    return pts


def grid_side(n: int) -> int:
    """Side of the smallest square lattice holding *n* nodes (at least 1)."""
    side = math.isqrt(n)
    if side * side < n:
        side += 1
    return max(1, side)


def star_positions(n: int, config: LayoutConfig) -> np.ndarray:
    """Hub at the origin, spokes evenly spread on a circle."""
    if n == 0:
        return _empty()
    if n == 1:
        return np.zeros((1, 3), dtype=float)
    i = np.arange(1, n)
    spokes = _circle(2.0 * math.pi * i / (n - 1), config.radius)
    return np.vstack([np.zeros((1, 3)), spokes])


def ring_positions(n: int, config: LayoutConfig) -> np.ndarray:
    if n == 0:
        return _empty()
    i = np.arange(n)
    return _circle(2.0 * math.pi * i / n, config.radius)


def grid_positions(n: int, config: LayoutConfig) -> np.ndarray:
    """Square lattice centred on the origin; the last row may be partial."""
    if n == 0:
        return _empty()
    side = grid_side(n)
    i = np.arange(n)
    offset = (side - 1) / 2.0
    pts = np.zeros((n, 3), dtype=float)
    pts[:, 0] = ((i % side) - offset) * config.grid_spacing
    pts[:, 1] = ((i // side) - offset) * config.grid_spacing
    return pts


def mesh_positions(n: int, config: LayoutConfig) -> np.ndarray:
    """Fibonacci (golden-angle) distribution over a sphere.

    ``phi`` walks the polar angle from the south pole upward while
    ``theta`` winds around the axis proportionally, which spreads points
    roughly uniformly over the surface.
    """
    if n == 0:
        return _empty()
    if n == 1:
        return np.array([[0.0, 0.0, config.radius]])
    i = np.arange(n)
    phi = np.arccos(-1.0 + 2.0 * i / n)
    theta = math.sqrt(n * math.pi) * phi
    r = config.radius
    return np.column_stack([
        r * np.cos(theta) * np.sin(phi),
        r * np.sin(theta) * np.sin(phi),
        r * np.cos(phi),
    ])


def hybrid_positions(n: int, config: LayoutConfig) -> np.ndarray:
    """Root, a small inner ring of up to three nodes, and an outer ring.

    Outer nodes get a ``sin(index)`` z-offset so the outer tier has depth.
    """
    if n == 0:
        return _empty()
    parts = [np.zeros((1, 3), dtype=float)]

    inner = min(HYBRID_INNER_SIZE, n - 1)
    if inner > 0:
        k = np.arange(1, inner + 1)
        parts.append(_circle(2.0 * math.pi * k / inner, config.inner_radius))

    outer = n - HYBRID_OUTER_START
    if outer > 0:
        k = np.arange(HYBRID_OUTER_START, n)
        parts.append(_circle(
            2.0 * math.pi * k / outer,
            config.outer_radius,
            np.sin(k) * config.outer_depth,
        ))
    return np.vstack(parts)


PLACEMENTS: dict[TopologyKind, Callable[[int, LayoutConfig], np.ndarray]] = {
    TopologyKind.STAR: star_positions,
    TopologyKind.RING: ring_positions,
    TopologyKind.GRID: grid_positions,
    TopologyKind.MESH: mesh_positions,
    TopologyKind.HYBRID: hybrid_positions,
}


def compute_layout(
    kind: TopologyKind | str,
    devices: Sequence[Device],
    config: LayoutConfig | None = None,
) -> list[NodeLayout]:
    """Assign a 3D position to every device.

    The result has exactly one entry per device, in input order.

    Raises:
        ConfigurationError: If *kind* is not a known topology kind.
    """
    kind = TopologyKind.parse(kind)
    config = config or LayoutConfig()
    n = len(devices)
    if n > config.max_devices_hint:
        logger.warning(
            f"Laying out {n} devices as {kind.value}; "
            f"recommended maximum is {config.max_devices_hint}"
        )

    coords = PLACEMENTS[kind](n, config)
    return [
        NodeLayout(
            index=idx,
            device_id=dev.id,
            position=(float(x), float(y), float(z)),
        )
        for idx, (dev, (x, y, z)) in enumerate(zip(devices, coords))
    ]

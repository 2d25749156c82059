"""Topology layout demo.

Lays out a six-device fleet in every topology kind and prints the node
coordinates and links.  The mesh uses a fixed seed, so the output is the
same on every run.

Run with:
    python -m topology_layout.examples.topology_demo
"""

from __future__ import annotations

import json
import logging

import numpy as np

from ..core.device import Device
from ..core.topology import Topology, TopologyKind
from ..layout.engine import TopologyEngine
from ..logging_config import setup_logging

SAMPLE_FLEET = [
    {"id": "1", "name": "VX_CORE_01", "ip": "10.0.0.1", "status": "online", "type": "router"},
    {"id": "2", "name": "NEURAL_UNIT_X", "ip": "10.0.0.2", "status": "alert", "type": "server"},
    {"id": "3", "name": "STORAGE_CLD", "ip": "10.0.0.15", "status": "online", "type": "server"},
    {"id": "4", "name": "WKS_QUANTUM", "ip": "10.0.0.102", "status": "online", "type": "workstation"},
    {"id": "5", "name": "IoT_EDGE_S4", "ip": "10.0.0.20", "status": "offline", "type": "iot"},
    {"id": "6", "name": "FIREWALL_VX", "ip": "10.0.0.5", "status": "online", "type": "router"},
]


def describe(topology: Topology, devices: list[Device]) -> str:
    lines = [f"[{topology.kind.value}]"]
    for node in topology.nodes:
        x, y, z = node.position
        name = devices[node.index].name
        lines.append(f"  {name:<14} ({x:7.2f}, {y:7.2f}, {z:7.2f})  deg={topology.degree(node.index)}")
    for e in topology.edges:
        flag = " !" if e.risk else ""
        lines.append(f"  {devices[e.source].name} -- {devices[e.target].name}{flag}")
    return "\n".join(lines)


def main(seed: int = 7) -> None:
    logger = setup_logging(logging.DEBUG)
    devices = [Device.from_mapping(r) for r in SAMPLE_FLEET]
    engine = TopologyEngine()

    for kind in TopologyKind:
        rng = np.random.default_rng(seed) if kind is TopologyKind.MESH else None
        topology = engine.build(kind, devices, rng=rng)
        print(describe(topology, devices))
        logger.info(
            f"{kind.value}: {len(topology.risky_edges())} of "
            f"{len(topology.edges)} links touch a flagged device"
        )

    mesh = engine.build(TopologyKind.MESH, devices, rng=np.random.default_rng(seed))
    print(json.dumps(mesh.to_dict(), indent=2))


if __name__ == "__main__":
    main()

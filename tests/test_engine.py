"""Integration tests for the topology engine."""

from __future__ import annotations

import json
import threading

import numpy as np
import pytest

from topology_layout.config import LayoutConfig
from topology_layout.core.device import Device
from topology_layout.core.errors import ConfigurationError
from topology_layout.core.topology import TopologyKind
from topology_layout.layout.engine import TopologyEngine


def _devices(n: int) -> list[Device]:
    return [Device(id=f"n{i}", status="alert" if i == 1 else "nominal") for i in range(n)]


class TestTopologyEngine:
    def test_build_star(self):
        topo = TopologyEngine().build(TopologyKind.STAR, _devices(5))
        assert topo.kind is TopologyKind.STAR
        assert len(topo) == 5
        assert len(topo.edges) == 4
        assert topo.degree(0) == 4
        assert topo.neighbors(3) == (0,)

    def test_build_grid_nine(self):
        topo = TopologyEngine().build("grid", _devices(9))
        assert topo.positions().shape == (9, 3)
        # corner, edge and centre of a 3x3 lattice
        assert topo.degree(0) == 2
        assert topo.degree(1) == 3
        assert topo.degree(4) == 4

    def test_build_hybrid_three(self):
        topo = TopologyEngine().build(TopologyKind.HYBRID, _devices(3))
        assert len(topo.nodes) == 3
        assert len(topo.edges) == 2

    def test_build_mesh_reproducible(self):
        engine = TopologyEngine()
        a = engine.build(TopologyKind.MESH, _devices(10), rng=np.random.default_rng(11))
        b = engine.build(TopologyKind.MESH, _devices(10), rng=np.random.default_rng(11))
        assert a == b

    def test_mesh_without_rng(self):
        with pytest.raises(ConfigurationError):
            TopologyEngine().build(TopologyKind.MESH, _devices(4))

    def test_unknown_kind_produces_nothing(self):
        with pytest.raises(ConfigurationError):
            TopologyEngine().build("bus", _devices(4))

    def test_empty(self):
        topo = TopologyEngine().build(TopologyKind.RING, [])
        assert len(topo) == 0
        assert topo.edges == ()
        assert topo.positions().shape == (0, 3)
        assert topo.adjacency_matrix().shape == (0, 0)

    def test_config_applied(self):
        engine = TopologyEngine(LayoutConfig(radius=1.0))
        topo = engine.build(TopologyKind.RING, _devices(6))
        np.testing.assert_allclose(np.linalg.norm(topo.positions(), axis=1), 1.0)

    def test_separate_layout_and_edges(self):
        engine = TopologyEngine()
        devices = _devices(6)
        layout = engine.compute_layout(TopologyKind.RING, devices)
        edges = engine.compute_edges(TopologyKind.RING, devices, layout)
        topo = engine.build(TopologyKind.RING, devices)
        assert tuple(layout) == topo.nodes
        assert tuple(edges) == topo.edges

    def test_accepts_generator_of_devices(self):
        topo = TopologyEngine().build(TopologyKind.STAR, (d for d in _devices(4)))
        assert len(topo) == 4
        assert len(topo.edges) == 3

    def test_debug_log(self, caplog):
        with caplog.at_level("DEBUG", logger="topology_layout"):
            TopologyEngine().build(TopologyKind.STAR, _devices(3))
        assert "Built star topology: 3 nodes, 2 edges (1 at risk)" in caplog.text

    def test_concurrent_calls_agree(self):
        engine = TopologyEngine()
        devices = _devices(40)
        expected = engine.build(TopologyKind.HYBRID, devices)
        results = []

        def work() -> None:
            results.append(engine.build(TopologyKind.HYBRID, devices))

        threads = [threading.Thread(target=work) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert all(r == expected for r in results)


class TestTopologySnapshot:
    def test_adjacency_symmetric(self):
        topo = TopologyEngine().build(TopologyKind.GRID, _devices(6))
        adj = topo.adjacency_matrix()
        assert (adj == adj.T).all()
        assert not adj.diagonal().any()
        assert adj.sum() == 2 * len(topo.edges)

    def test_risky_edges(self):
        topo = TopologyEngine().build(TopologyKind.RING, _devices(4))
        assert {e.pair for e in topo.risky_edges()} == {(0, 1), (1, 2)}

    def test_to_dict_is_json_serialisable(self):
        topo = TopologyEngine().build(TopologyKind.STAR, _devices(3))
        data = json.loads(json.dumps(topo.to_dict()))
        assert data["kind"] == "star"
        assert [n["id"] for n in data["nodes"]] == ["n0", "n1", "n2"]
        assert data["nodes"][0]["position"] == [0.0, 0.0, 0.0]
        assert data["edges"] == [
            {"source": 0, "target": 1, "risk": True},
            {"source": 0, "target": 2, "risk": False},
        ]

    def test_neighbors_of_unknown_index(self):
        topo = TopologyEngine().build(TopologyKind.RING, _devices(3))
        assert topo.neighbors(99) == ()

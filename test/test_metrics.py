"""
test_metrics.py — Tree quality metrics.
"""

import math

import numpy as np
import pytest

from lineart_rrt import TreeBuilder, TreeMetrics, evaluate_tree


class TestEvaluateTree:

    def test_rewire_scenario_metrics(self, rewire_builder):
        b = rewire_builder
        for _ in range(3):
            b.advance()
        m = evaluate_tree(b)
        s2 = math.sqrt(2.0)
        assert m.n_points == 4
        assert m.n_edges == 3
        assert m.total_length == pytest.approx(3.0 + s2)
        assert m.max_edge_length == pytest.approx(2.0)
        assert m.mean_edge_length == pytest.approx((3.0 + s2) / 3.0)
        assert m.max_depth == 2
        assert m.max_cost == pytest.approx(1.0 + s2)
        assert m.mean_cost == pytest.approx((2.0 + (1.0 + s2) + s2) / 3.0)
        assert m.n_leaves == 2
        assert m.coverage == pytest.approx(4 / 6)

    def test_root_only(self, grid10_config):
        m = evaluate_tree(TreeBuilder(grid10_config))
        assert m.n_points == 1
        assert m.n_edges == 0
        assert m.total_length == 0.0
        assert m.max_depth == 0
        assert m.n_leaves == 0
        assert m.coverage == pytest.approx(0.01)

    def test_full_coverage(self, grid10_config):
        cfg = grid10_config
        cfg.iteration_budget = 200
        b = TreeBuilder(cfg, rng=np.random.default_rng(4))
        b.run()
        m = evaluate_tree(b)
        assert m.coverage == pytest.approx(1.0)
        assert m.total_length == pytest.approx(b.run().total_length)


class TestTreeMetrics:

    def test_to_dict_and_summary(self):
        m = TreeMetrics(n_points=3, n_edges=2, total_length=2.5, coverage=0.5)
        d = m.to_dict()
        assert d["total_length"] == 2.5
        assert set(d) >= {"n_points", "max_depth", "coverage"}
        text = m.summary()
        assert "2.5000" in text
        assert "50.00%" in text

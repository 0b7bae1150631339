"""
test_tree.py — Unit tests for the index-based TreeArena.

Covers:
    - admission rules (single root, valid parents, identity of points)
    - cached vs. recomputed path cost
    - re-parenting: subtree cost refresh and cycle rejection
    - capacity growth, edges, leaves, validate()
"""

import math

import numpy as np
import pytest

from lineart_rrt import CycleDetected, LineArtRRTError, Point, TreeArena


@pytest.fixture()
def small_tree():
    """root(0,0) ─ a(1,0) ─ b(2,0)
                 └ c(0,1) ─ d(0,2)"""
    arena = TreeArena(cap=2)
    root = arena.add(Point(0.0, 0.0))
    a = arena.add(Point(1.0, 0.0), parent=root)
    b = arena.add(Point(2.0, 0.0), parent=a)
    c = arena.add(Point(0.0, 1.0), parent=root)
    d = arena.add(Point(0.0, 2.0), parent=c)
    return arena, (root, a, b, c, d)


class TestAdmission:

    def test_indices_are_sequential(self, small_tree):
        arena, ids = small_tree
        assert ids == (0, 1, 2, 3, 4)
        assert len(arena) == 5

    def test_capacity_grows(self, small_tree):
        arena, _ = small_tree
        assert arena.xy.shape == (5, 2)
        np.testing.assert_array_equal(arena.xy[4], [0.0, 2.0])

    def test_first_point_must_be_root(self):
        arena = TreeArena()
        with pytest.raises(ValueError):
            arena.add(Point(0.0, 0.0), parent=0)

    def test_parent_must_exist(self):
        arena = TreeArena()
        arena.add(Point(0.0, 0.0))
        with pytest.raises(ValueError):
            arena.add(Point(1.0, 0.0), parent=5)
        with pytest.raises(ValueError):
            arena.add(Point(1.0, 0.0))

    def test_same_object_only_once(self):
        arena = TreeArena()
        p = Point(0.0, 0.0)
        arena.add(p)
        with pytest.raises(ValueError):
            arena.add(p, parent=0)

    def test_points_compare_by_identity(self):
        arena = TreeArena()
        p = Point(0.0, 0.0)
        q = Point(0.0, 0.0)
        arena.add(p)
        arena.add(q, parent=0)
        assert arena.index_of(p) == 0
        assert arena.index_of(q) == 1
        assert p in arena and q in arena
        assert Point(0.0, 0.0) not in arena

    def test_index_of_unknown_raises(self):
        arena = TreeArena()
        arena.add(Point(0.0, 0.0))
        with pytest.raises(KeyError):
            arena.index_of(Point(1.0, 1.0))


class TestCost:

    def test_root_cost_zero(self, small_tree):
        arena, _ = small_tree
        assert arena.cost(0) == 0.0
        assert arena.path_cost(0) == 0.0

    def test_cached_matches_walk(self, small_tree):
        arena, (_, a, b, c, d) = small_tree
        assert arena.cost(b) == pytest.approx(2.0)
        assert arena.cost(d) == pytest.approx(2.0)
        for i in range(len(arena)):
            assert arena.cost(i) == pytest.approx(arena.path_cost(i))

    def test_depth_and_path(self, small_tree):
        arena, (root, a, b, c, d) = small_tree
        assert arena.depth(root) == 0
        assert arena.depth(b) == 2
        assert arena.path_to(b) == [root, a, b]
        assert list(arena.ancestors(d)) == [c, root]


class TestSetParent:

    def test_subtree_costs_refresh(self, small_tree):
        arena, (root, a, b, c, d) = small_tree
        arena.set_parent(a, c)
        assert arena.parent_of(a) == c
        assert arena.cost(a) == pytest.approx(1.0 + math.sqrt(2.0))
        assert arena.cost(b) == pytest.approx(2.0 + math.sqrt(2.0))
        assert a in arena.children_of(c)
        assert a not in arena.children_of(root)
        arena.validate()

    def test_rejects_descendant_as_parent(self, small_tree):
        arena, (root, a, b, c, d) = small_tree
        arena.set_parent(a, c)
        # b -> a -> c -> root: hanging c under b would close a loop
        with pytest.raises(CycleDetected) as exc:
            arena.set_parent(c, b)
        assert exc.value.child == c
        assert exc.value.new_parent == b
        assert arena.parent_of(c) == root
        arena.validate()

    def test_rejects_self(self, small_tree):
        arena, (_, a, *_rest) = small_tree
        with pytest.raises(CycleDetected):
            arena.set_parent(a, a)

    def test_rejects_root(self, small_tree):
        arena, (root, a, *_rest) = small_tree
        with pytest.raises(ValueError):
            arena.set_parent(root, a)

    def test_same_parent_is_noop(self, small_tree):
        arena, (root, a, *_rest) = small_tree
        arena.set_parent(a, root)
        assert arena.children_of(root).count(a) == 1

    def test_is_ancestor(self, small_tree):
        arena, (root, a, b, c, d) = small_tree
        assert arena.is_ancestor(root, b)
        assert arena.is_ancestor(a, b)
        assert not arena.is_ancestor(c, b)
        assert not arena.is_ancestor(b, b)


class TestReadout:

    def test_edges(self, small_tree):
        arena, (root, a, b, c, d) = small_tree
        assert arena.edges() == [(root, a), (a, b), (root, c), (c, d)]

    def test_edge_lengths(self, small_tree):
        arena, _ = small_tree
        np.testing.assert_allclose(arena.edge_lengths(), [1.0, 1.0, 1.0, 1.0])

    def test_leaves(self, small_tree):
        arena, (_, _, b, _, d) = small_tree
        assert arena.leaves() == [b, d]

    def test_single_root(self):
        arena = TreeArena()
        arena.add(Point(3.0, 3.0))
        assert arena.edges() == []
        assert arena.edge_lengths().shape == (0,)
        arena.validate()


class TestValidate:

    def test_detects_stale_cost(self, small_tree):
        arena, (_, _, b, _, _) = small_tree
        arena._costs[b] += 0.5
        with pytest.raises(LineArtRRTError):
            arena.validate()

    def test_detects_cycle(self, small_tree):
        arena, (_, a, b, _, _) = small_tree
        arena._parents[a] = b
        with pytest.raises(LineArtRRTError):
            arena.validate()

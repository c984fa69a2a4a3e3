#!/usr/bin/env python3
# test_graph_model.py
# Tests for the graph model and generators

import sys
import os

import numpy as np
import pytest

sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from graph_model import Graph, complete_graph, cycle_graph, graph_from_edges, random_graph


def test_complete_graph():
    g = complete_graph(4)
    assert g.vertex_number() == 4
    assert g.num_edges() == 12
    for u in range(4):
        assert g.neighbors(u) == frozenset(v for v in range(4) if v != u)
        assert not g.has_edge(u, u)


def test_cycle_graph_is_directed():
    g = cycle_graph(5)
    assert g.edges() == [(0, 1), (1, 2), (2, 3), (3, 4), (4, 0)]
    assert g.has_edge(4, 0)
    assert not g.has_edge(0, 4)


def test_singleton_cycle_has_self_loop():
    g = cycle_graph(1)
    assert g.neighbors(0) == frozenset({0})


def test_graph_from_edges():
    directed = graph_from_edges(3, [(0, 1), (1, 2)])
    assert directed.edges() == [(0, 1), (1, 2)]

    undirected = graph_from_edges(3, [(0, 1), (1, 2)], directed=False)
    assert undirected.edges() == [(0, 1), (1, 0), (1, 2), (2, 1)]


def test_rejects_out_of_range_vertices():
    with pytest.raises(ValueError):
        Graph([[1], [2]])
    with pytest.raises(ValueError):
        Graph([[-1]])
    with pytest.raises(ValueError):
        graph_from_edges(2, [(0, 5)])


def test_numpy_neighbor_ids():
    g = Graph([np.array([1]), np.array([], dtype=int)])
    assert g.neighbors(0) == frozenset({1})
    assert all(type(v) is int for v in g.neighbors(0))
    assert g == Graph([[1], []])


def test_rejects_non_integer_neighbors():
    with pytest.raises(ValueError, match="non-integer"):
        Graph([[True], []])
    with pytest.raises(ValueError, match="non-integer"):
        Graph([[1.0], []])


def test_graph_is_immutable_snapshot():
    adjacency = [[1], [0]]
    g = Graph(adjacency)
    adjacency[0].append(0)
    assert g.neighbors(0) == frozenset({1})
    assert g == Graph([[1], [0]])


def test_empty_graph():
    g = Graph([])
    assert g.vertex_number() == 0
    assert g.edges() == []


def test_random_graph_is_reproducible():
    g1 = random_graph(8, 0.4, seed=7)
    g2 = random_graph(8, 0.4, seed=7)
    assert g1 == g2
    assert all(not g1.has_edge(v, v) for v in range(8))


def test_random_graph_extremes():
    assert random_graph(5, 0.0, seed=1).num_edges() == 0
    assert random_graph(5, 1.0, seed=1) == complete_graph(5)
    with pytest.raises(ValueError):
        random_graph(5, 1.5)


if __name__ == '__main__':
    sys.exit(pytest.main([__file__, '-v']))

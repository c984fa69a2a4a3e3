# graph_model.py
# Directed graph model and simple graph generators for Hamiltonian path queries

import numbers

import numpy as np


def as_vertex(value):
    """
    Plain int for an integral vertex id (Python or numpy), None otherwise

    bool and numpy.bool_ are not vertex ids.
    """
    if isinstance(value, numbers.Integral) and not isinstance(value, (bool, np.bool_)):
        return int(value)
    return None


class Graph:
    """
    Immutable directed graph over vertices 0..n-1

    adjacency[k] lists the successors of vertex k. Edges are directed:
    u -> v does not imply v -> u. Integral ids (numpy included) are stored
    as plain ints.
    """

    def __init__(self, adjacency):
        n = len(adjacency)
        neighbor_sets = []
        for u, successors in enumerate(adjacency):
            successor_set = set()
            for v in successors:
                vertex = as_vertex(v)
                if vertex is None:
                    raise ValueError(f"Vertex {u} has non-integer neighbor {v!r}")
                if not 0 <= vertex < n:
                    raise ValueError(f"Vertex {u} has neighbor {vertex} outside [0, {n})")
                successor_set.add(vertex)
            neighbor_sets.append(frozenset(successor_set))
        self._adjacency = tuple(neighbor_sets)

    def vertex_number(self):
        """Number of vertices n"""
        return len(self._adjacency)

    def __len__(self):
        return len(self._adjacency)

    def neighbors(self, v):
        return self._adjacency[v]

    def has_edge(self, u, v):
        return v in self._adjacency[u]

    def edges(self):
        """Sorted list of directed edges (u, v)"""
        return sorted((u, v) for u, successors in enumerate(self._adjacency) for v in successors)

    def num_edges(self):
        return sum(len(successors) for successors in self._adjacency)

    def __eq__(self, other):
        if not isinstance(other, Graph):
            return NotImplemented
        return self._adjacency == other._adjacency

    def __hash__(self):
        return hash(self._adjacency)

    def __repr__(self):
        return f"Graph(n={self.vertex_number()}, edges={self.num_edges()})"


def graph_from_edges(n, edges, directed=True):
    """
    Build a graph from an edge list

    Args:
        n: Number of vertices
        edges: Iterable of (u, v) pairs, 0-based
        directed: If False, every edge is added in both directions
    """
    adjacency = [set() for _ in range(n)]
    for u, v in edges:
        if not 0 <= u < n:
            raise ValueError(f"Edge ({u}, {v}) references vertex outside [0, {n})")
        adjacency[u].add(v)
        if not directed:
            if not 0 <= v < n:
                raise ValueError(f"Edge ({u}, {v}) references vertex outside [0, {n})")
            adjacency[v].add(u)
    return Graph(adjacency)


def complete_graph(n):
    """K_n: every ordered pair of distinct vertices is an edge"""
    return Graph([[i for i in range(n) if i != k] for k in range(n)])


def cycle_graph(n):
    """Directed cycle C_n: only the forward edge k -> (k+1) mod n"""
    return Graph([[(k + 1) % n] for k in range(n)])


def random_graph(n, edge_probability=0.5, seed=None):
    """
    Random directed graph (Erdos-Renyi style, no self-loops)

    Each ordered pair u != v becomes an edge independently with
    probability edge_probability. A seed makes the result reproducible.
    """
    if not 0.0 <= edge_probability <= 1.0:
        raise ValueError(f"edge_probability must be in [0, 1], got {edge_probability}")

    rng = np.random.RandomState(seed)
    mask = rng.random_sample((n, n)) < edge_probability
    np.fill_diagonal(mask, False)

    return Graph([np.flatnonzero(mask[k]).tolist() for k in range(n)])

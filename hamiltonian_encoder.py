# hamiltonian_encoder.py
# CNF encoding of the Hamiltonian path problem
#
# Variables x_{i,v}: position i of the path holds vertex v (see variable_encoding.py)
# Families 1-4 make position <-> vertex a bijection, family 5 enforces
# directed adjacency between consecutive positions, family 6 fixes endpoints.

import time
from dataclasses import dataclass, field
from typing import Dict, Tuple

from graph_model import as_vertex
from variable_encoding import VariableEncoding


class InvalidInputError(ValueError):
    """Graph or endpoints rejected before encoding"""
    pass


class ConstructionContradictionError(RuntimeError):
    """Generated unit clauses contradict each other (encoder defect)"""
    pass


FAMILY_NAMES = (
    'vertex_coverage',
    'vertex_uniqueness',
    'position_coverage',
    'position_uniqueness',
    'adjacency',
    'endpoints',
)


@dataclass(frozen=True)
class CNFInstance:
    """CNF for one (graph, s, t) query. Built once, never mutated."""
    num_vertices: int
    num_variables: int
    clauses: Tuple[Tuple[int, ...], ...]
    family_counts: Dict[str, int] = field(default_factory=dict)

    @property
    def num_clauses(self):
        return len(self.clauses)

    def to_dimacs(self):
        """DIMACS CNF text"""
        lines = [f"p cnf {self.num_variables} {len(self.clauses)}"]
        for clause in self.clauses:
            lines.append(' '.join(map(str, clause)) + ' 0')
        return '\n'.join(lines) + '\n'


def validate_query(graph, s, t):
    """
    Reject n < 1 and endpoints outside [0, n)

    Returns:
        (s, t) as plain ints
    """
    n = graph.vertex_number()
    if n < 1:
        raise InvalidInputError(f"Graph must have at least one vertex, got n={n}")
    endpoints = []
    for name, value in (('source', s), ('target', t)):
        vertex = as_vertex(value)
        if vertex is None:
            raise InvalidInputError(f"{name} must be an integer, got {value!r}")
        if not 0 <= vertex < n:
            raise InvalidInputError(f"{name}={vertex} outside [0, {n})")
        endpoints.append(vertex)
    return tuple(endpoints)


def encode_vertex_coverage(n, encoding):
    """Each vertex appears AT LEAST ONCE in the path"""
    for v in range(n):
        yield [encoding.encode(i, v) for i in range(n)]


def encode_vertex_uniqueness(n, encoding):
    """Each vertex appears NO MORE THAN ONCE in the path"""
    for v in range(n):
        for i in range(n):
            for j in range(i + 1, n):
                yield [-encoding.encode(i, v), -encoding.encode(j, v)]


def encode_position_coverage(n, encoding):
    """Each position in the path is occupied by AT LEAST ONE vertex"""
    for i in range(n):
        yield [encoding.encode(i, v) for v in range(n)]


def encode_position_uniqueness(n, encoding):
    """Each position is occupied by NO MORE THAN ONE vertex"""
    for i in range(n):
        for v in range(n):
            for u in range(v + 1, n):
                yield [-encoding.encode(i, v), -encoding.encode(i, u)]


def encode_adjacency_constraints(graph, encoding):
    """
    Consecutive vertices in the path are adjacent in the graph

    Position i may hold u while position i+1 holds v only if u -> v is an
    edge. Only u's successor set is consulted, so direction matters.
    """
    n = graph.vertex_number()
    for i in range(n - 1):
        for u in range(n):
            successors = graph.neighbors(u)
            for v in range(n):
                if v not in successors:
                    yield [-encoding.encode(i, u), -encoding.encode(i + 1, v)]


def encode_endpoint_anchors(n, s, t, encoding):
    """The first vertex is s, the last vertex is t"""
    encoding.check_position_vertex(0, s)
    encoding.check_position_vertex(n - 1, t)
    yield [encoding.encode(0, s)]
    yield [encoding.encode(n - 1, t)]


def encode_all_constraints(graph, s, t, encoding):
    """
    Stream every clause family as (family_name, clause) pairs

    Order: vertex coverage, vertex uniqueness, position coverage,
    position uniqueness, adjacency, endpoints.
    """
    n = graph.vertex_number()
    families = (
        ('vertex_coverage', encode_vertex_coverage(n, encoding)),
        ('vertex_uniqueness', encode_vertex_uniqueness(n, encoding)),
        ('position_coverage', encode_position_coverage(n, encoding)),
        ('position_uniqueness', encode_position_uniqueness(n, encoding)),
        ('adjacency', encode_adjacency_constraints(graph, encoding)),
        ('endpoints', encode_endpoint_anchors(n, s, t, encoding)),
    )
    for name, clauses in families:
        for clause in clauses:
            yield name, clause


def check_unit_clauses(clauses):
    """Raise if some unit clause [l] appears together with [-l]"""
    units = set()
    for clause in clauses:
        if len(clause) == 1:
            literal = clause[0]
            if -literal in units:
                raise ConstructionContradictionError(
                    f"Contradicting unit clauses [{literal}] and [{-literal}]")
            units.add(literal)


def encode_hamiltonian_path(graph, s, t, verbose=False):
    """
    Build the CNF instance whose models are exactly the Hamiltonian paths s -> t

    Args:
        graph: Graph with n >= 1 vertices
        s: Source vertex (position 0)
        t: Target vertex (position n-1)
        verbose: Print per-family clause counts

    Returns:
        CNFInstance
    """
    s, t = validate_query(graph, s, t)

    n = graph.vertex_number()
    encoding = VariableEncoding(n)

    start_time = time.time()
    family_counts = {name: 0 for name in FAMILY_NAMES}
    clauses = []
    for name, clause in encode_all_constraints(graph, s, t, encoding):
        clauses.append(tuple(clause))
        family_counts[name] += 1

    check_unit_clauses(clauses)

    if verbose:
        print(f"Encoded Hamiltonian path {s} -> {t} on {n} vertices "
              f"in {time.time() - start_time:.3f}s")
        for name in FAMILY_NAMES:
            print(f"  {name}: {family_counts[name]} clauses")
        print(f"Number of variables: {encoding.num_variables}")
        print(f"Number of constraints: {len(clauses)}")

    return CNFInstance(
        num_vertices=n,
        num_variables=encoding.num_variables,
        clauses=tuple(clauses),
        family_counts=family_counts,
    )

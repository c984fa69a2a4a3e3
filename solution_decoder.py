# solution_decoder.py
# Map a satisfying model back to the vertex sequence of the Hamiltonian path

from variable_encoding import VariableEncoding


class DecodingError(RuntimeError):
    """Model violates the encoder's bijection constraints (oracle/adapter bug)"""
    pass


def decode_path(model, n, encoding=None):
    """
    Extract the path from a SAT model

    For every true variable x_{i,v} with id in [1, n*n], path[i] = v.
    Variables missing from the model count as false.

    Args:
        model: Iterable of signed literals (PySAT/DIMACS style)
        n: Number of vertices
        encoding: VariableEncoding for n (created if None)

    Returns:
        list: path[i] = vertex at position i

    Raises:
        DecodingError: no model, a position holds two vertices, a position is unset,
            or a vertex appears at two positions
    """
    if encoding is None:
        encoding = VariableEncoding(n)
    elif encoding.n != n:
        raise ValueError(f"Encoding is for n={encoding.n}, decoding n={n}")

    if model is None:
        raise DecodingError("No model to decode")

    true_vars = {lit for lit in model if 0 < lit <= encoding.num_variables}

    path = [None] * n
    for var_id in sorted(true_vars):
        i, v = encoding.decode(var_id)
        if path[i] is not None:
            raise DecodingError(
                f"Position {i} holds both vertex {path[i]} and vertex {v}")
        path[i] = v

    unset = [i for i, v in enumerate(path) if v is None]
    if unset:
        raise DecodingError(f"Positions {unset} hold no vertex")

    if len(set(path)) != n:
        repeated = sorted({v for v in path if path.count(v) > 1})
        raise DecodingError(f"Vertices {repeated} appear at more than one position")

    return path

# variable_encoding.py
# Bijection between (position, vertex) pairs and SAT variable ids

class VariableEncoding:
    """
    x_{i,v} means "the i-th vertex of the path is v"

    x_{i,v} is the variable i + n*v + 1. SAT solvers reserve 0 as the
    clause terminator, hence the +1. Inverse:
        i = (k - 1) % n
        v = (k - 1) // n

    encode/decode do no range checks; callers keep 0 <= i, v < n and
    1 <= k <= n*n.
    """

    def __init__(self, n):
        if n < 1:
            raise ValueError(f"Variable encoding needs n >= 1, got {n}")
        self.n = n
        self.num_variables = n * n

    def encode(self, i, v):
        return i + self.n * v + 1

    def decode(self, var_id):
        return (var_id - 1) % self.n, (var_id - 1) // self.n

    def all_variables(self):
        return range(1, self.num_variables + 1)

    def check_position_vertex(self, i, v):
        if not (0 <= i < self.n and 0 <= v < self.n):
            raise ValueError(f"(position={i}, vertex={v}) outside [0, {self.n})")

    def __repr__(self):
        return f"VariableEncoding(n={self.n}, variables={self.num_variables})"

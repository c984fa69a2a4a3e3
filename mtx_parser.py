# mtx_parser.py
# Parser for MTX (Matrix Market) sparse matrix format
# Converts the sparsity pattern to a directed graph for Hamiltonian path queries

from graph_model import graph_from_edges

SYMMETRIC_KINDS = ('symmetric', 'skew-symmetric', 'hermitian')


class MTXParser:
    """
    Parser for MTX (Matrix Market) format files

    Entry (row, col) becomes the directed edge row-1 -> col-1.
    Symmetric matrices store one triangle, so each entry yields both
    directions. Diagonal entries (self-loops) are dropped.
    """

    def __init__(self, mtx_file_path, verbose=True):
        """
        Initialize MTX parser

        Args:
            mtx_file_path: Path to the .mtx file
            verbose: Print parsing progress
        """
        self.mtx_file_path = mtx_file_path
        self.verbose = verbose
        self.matrix_info = {}
        self.edges = []
        self.num_nodes = 0
        self.num_edges = 0

    def parse_mtx_file(self):
        """
        Parse MTX file and extract graph structure

        Returns:
            dict: Dictionary with graph information
                - num_nodes: Number of nodes
                - num_edges: Number of directed edges
                - edges: Sorted list of 0-based tuples [(u,v), ...]
                - matrix_info: Header information

        Raises:
            ValueError: missing header, bad size line or bad entry
        """
        if self.verbose:
            print(f"Parsing MTX file: {self.mtx_file_path}")

        with open(self.mtx_file_path, 'r') as f:
            lines = f.readlines()

        if not lines or not lines[0].strip().startswith('%%MatrixMarket'):
            raise ValueError("Invalid MTX file: Missing MatrixMarket header")

        header_line = lines[0].strip()
        header_fields = header_line.lower().split()
        symmetry = header_fields[4] if len(header_fields) >= 5 else 'general'
        symmetric = symmetry in SYMMETRIC_KINDS

        # Skip comment and blank lines
        data_lines = [line.strip() for line in lines[1:]
                      if line.strip() and not line.strip().startswith('%')]
        if not data_lines:
            raise ValueError("Invalid MTX file: Missing size line")

        dims = data_lines[0].split()
        if len(dims) < 3:
            raise ValueError(f"Invalid MTX size line: {data_lines[0]}")
        rows, cols, nnz = int(dims[0]), int(dims[1]), int(dims[2])

        self.matrix_info = {
            'rows': rows,
            'cols': cols,
            'nnz': nnz,
            'symmetry': symmetry,
            'header': header_line
        }

        if self.verbose:
            print(f"Matrix dimensions: {rows} x {cols}, Non-zeros: {nnz}, {symmetry}")

        if rows != cols and self.verbose:
            print(f"Warning: Non-square matrix ({rows} x {cols}). Using max dimension.")
        self.num_nodes = max(rows, cols)

        edges_set = set()
        for line_num, line in enumerate(data_lines[1:], 1):
            parts = line.split()
            if len(parts) < 2:
                raise ValueError(f"Invalid MTX entry {line_num}: {line}")

            row = int(parts[0]) - 1
            col = int(parts[1]) - 1
            if not (0 <= row < self.num_nodes and 0 <= col < self.num_nodes):
                raise ValueError(f"MTX entry {line_num} out of range: {line}")

            # Skip diagonal entries (self-loops)
            if row == col:
                continue

            edges_set.add((row, col))
            if symmetric:
                edges_set.add((col, row))

        self.edges = sorted(edges_set)
        self.num_edges = len(self.edges)

        if self.verbose:
            print(f"Graph extracted: {self.num_nodes} nodes, {self.num_edges} directed edges")

        return {
            'num_nodes': self.num_nodes,
            'num_edges': self.num_edges,
            'edges': self.edges,
            'matrix_info': self.matrix_info
        }

    def to_graph(self):
        """Graph built from the parsed edges (parses the file if needed)"""
        if not self.matrix_info:
            self.parse_mtx_file()
        return graph_from_edges(self.num_nodes, self.edges)

    def get_graph_statistics(self):
        """
        Get basic graph statistics

        Returns:
            dict: Graph statistics (out-degree based)
        """
        if not self.matrix_info:
            return {}

        out_degree = [0] * self.num_nodes
        in_degree = [0] * self.num_nodes
        for u, v in self.edges:
            out_degree[u] += 1
            in_degree[v] += 1

        n = self.num_nodes
        return {
            'num_nodes': n,
            'num_edges': self.num_edges,
            'min_out_degree': min(out_degree) if out_degree else 0,
            'max_out_degree': max(out_degree) if out_degree else 0,
            'avg_out_degree': self.num_edges / n if n else 0,
            'sources': sum(1 for d in in_degree if d == 0),
            'sinks': sum(1 for d in out_degree if d == 0),
            'density': self.num_edges / (n * (n - 1)) if n > 1 else 0
        }


def load_mtx_graph(mtx_file_path, verbose=False):
    """Parse an MTX file and return the Graph"""
    parser = MTXParser(mtx_file_path, verbose=verbose)
    parser.parse_mtx_file()
    return parser.to_graph()

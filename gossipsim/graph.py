import networkx as nx
import numpy as np

from .config import ConfigError


def validate_topology(n, out_degree):
    if n < 1:
        raise ConfigError(f"need at least one node, got {n}")
    if out_degree < 0:
        raise ConfigError(f"out-degree must be >= 0, got {out_degree}")
    if out_degree >= n:
        raise ConfigError(f"out-degree {out_degree} needs more than {n} nodes")


def gen_peers(n, out_degree, rng):
    """
    Generate a directed peer list per node.

    Each node draws uniformly random candidates and keeps the first
    out_degree distinct ones that are not itself. Peers are kept in draw
    order. The graph is not symmetric and may be disconnected.
    """
    validate_topology(n, out_degree)
    peers = []
    for u in range(n):
        selected = []
        seen = set()
        while len(selected) < out_degree:
            v = int(rng.integers(0, n))
            if v == u or v in seen:
                continue
            seen.add(v)
            selected.append(v)
        peers.append(np.array(selected, dtype=np.int32))
    return peers


def to_digraph(peers):
    G = nx.DiGraph()
    G.add_nodes_from(range(len(peers)))
    G.add_edges_from((u, int(v)) for u, vs in enumerate(peers) for v in vs)
    return G


def reach_counts(peers):
    """Number of nodes reachable from each node, itself included."""
    G = to_digraph(peers)
    # nodes in one strongly connected component share a reachable set
    C = nx.condensation(G)
    size = {c: len(C.nodes[c]["members"]) for c in C.nodes}
    reach = {c: size[c] + sum(size[d] for d in nx.descendants(C, c)) for c in C.nodes}
    return np.array([reach[C.graph["mapping"][u]] for u in range(len(peers))], dtype=np.int32)

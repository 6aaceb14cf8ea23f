"""Tests for peer topology generation."""

import numpy as np
import pytest

from gossipsim.config import ConfigError
from gossipsim.graph import gen_peers, reach_counts, to_digraph, validate_topology


@pytest.mark.parametrize("n,k", [(20, 8), (50, 8), (9, 8), (1000, 8)])
def test_peer_lists_have_exact_degree_no_self_no_duplicates(n, k):
    peers = gen_peers(n, k, np.random.default_rng(7))
    assert len(peers) == n
    for u, ps in enumerate(peers):
        assert len(ps) == k
        assert u not in ps
        assert len(set(ps.tolist())) == k


def test_full_mesh_when_degree_is_n_minus_one():
    peers = gen_peers(5, 4, np.random.default_rng(0))
    for u, ps in enumerate(peers):
        assert set(ps.tolist()) == set(range(5)) - {u}


def test_zero_degree_gives_isolated_nodes():
    peers = gen_peers(4, 0, np.random.default_rng(0))
    assert all(len(ps) == 0 for ps in peers)


def test_same_seed_same_graph():
    a = gen_peers(30, 5, np.random.default_rng(99))
    b = gen_peers(30, 5, np.random.default_rng(99))
    assert all(np.array_equal(x, y) for x, y in zip(a, b))


@pytest.mark.parametrize("n,k", [(5, 5), (5, 6), (0, 0), (3, -1)])
def test_invalid_degree_rejected_before_sampling(n, k):
    with pytest.raises(ConfigError):
        validate_topology(n, k)
    with pytest.raises(ConfigError):
        gen_peers(n, k, np.random.default_rng(0))


def test_digraph_is_directed():
    peers = [np.array([1]), np.array([], dtype=np.int32), np.array([1])]
    G = to_digraph(peers)
    assert G.number_of_nodes() == 3
    assert set(G.edges()) == {(0, 1), (2, 1)}


def test_reach_counts():
    # 0 -> 1 -> 2 -> 0 is a cycle; 3 feeds into it; 4 is isolated
    peers = [np.array([1]), np.array([2]), np.array([0]), np.array([0]), np.array([], dtype=np.int32)]
    assert reach_counts(peers).tolist() == [3, 3, 3, 4, 1]

"""Shared fixtures for gossipsim tests."""

import numpy as np
import pytest

from gossipsim.metrics import Metrics
from gossipsim.node import GossipNode
from gossipsim.scheduler import EventScheduler
from gossipsim.transport import DirectLink


class RecordingLink:
    """Link stub that records every send instead of scheduling it."""

    def __init__(self):
        self.sent = []

    def send(self, sender_id, target, message, hops):
        self.sent.append((sender_id, target.node_id, message.key, hops))


@pytest.fixture
def scheduler():
    return EventScheduler()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def recording_link():
    return RecordingLink()


@pytest.fixture
def build_network(scheduler, rng):
    """Wire GossipNodes over explicit peer lists with a DirectLink."""

    def _build(peer_lists, forward_delay=(0.010, 0.030), link_latency=(0.0, 0.0), link=None):
        metrics = Metrics(len(peer_lists))
        if link is None:
            link = DirectLink(scheduler, rng, *link_latency, metrics=metrics)
        nodes = [
            GossipNode(u, scheduler, rng, link, metrics, *forward_delay)
            for u in range(len(peer_lists))
        ]
        for u, peers in enumerate(peer_lists):
            nodes[u].connect([nodes[v] for v in peers])
        return nodes, metrics

    return _build

import logging

import numpy as np

from .config import SimConfig
from .graph import gen_peers, reach_counts
from .message import Message
from .metrics import Metrics
from .miner import MinerProcess
from .node import GossipNode
from .report import format_node_details, format_report
from .scheduler import EventScheduler
from .transport import DirectLink, SessionLink

logger = logging.getLogger(__name__)


class Node:
    """A simulated participant: gossip state plus its miner."""
    def __init__(self, gossip: GossipNode, miner: MinerProcess):
        self.gossip = gossip
        self.miner = miner

    @property
    def node_id(self):
        return self.gossip.node_id

    def start(self, delay=None):
        self.miner.start(delay)

    def stop(self):
        self.miner.stop()


class Sim:
    def __init__(self, cfg: SimConfig):
        self.cfg = cfg.validate()
        # seeded once; every random draw in the run comes from this generator
        self.seed = cfg.seed if cfg.seed is not None else int(np.random.SeedSequence().entropy % 2**63)
        self.rng = np.random.default_rng(self.seed)
        self.n = cfg.nodes

        self.scheduler = EventScheduler()
        self.metrics = Metrics(self.n)

        # Peer graph
        self.peers = gen_peers(self.n, cfg.peers, self.rng)

        # Links
        if cfg.transport == "session":
            self.link = SessionLink(self.scheduler, self.rng, cfg.link_latency_min, cfg.link_latency_max,
                                    metrics=self.metrics, linger=cfg.linger,
                                    connect_failure_rate=cfg.connect_failure_rate)
        else:
            self.link = DirectLink(self.scheduler, self.rng, cfg.link_latency_min, cfg.link_latency_max,
                                   metrics=self.metrics)

        # Nodes
        self.nodes = []
        for u in range(self.n):
            g = GossipNode(u, self.scheduler, self.rng, self.link, self.metrics,
                           cfg.forward_delay_min, cfg.forward_delay_max)
            m = MinerProcess(g, self.scheduler, self.rng, self.metrics, cfg.mining_cutoff,
                             interval_min=cfg.mining_interval_min, interval_max=cfg.mining_interval_max,
                             startup_jitter=cfg.startup_jitter, label=cfg.label, key_mode=cfg.key_mode,
                             max_blocks=1 if cfg.single_sender else None)
            self.nodes.append(Node(g, m))
        for u, node in enumerate(self.nodes):
            node.gossip.connect([self.nodes[int(v)].gossip for v in self.peers[u]])

    def inject(self, origin=0, label=None, seq=1):
        """Hand one message to a node as if its miner had just produced it."""
        msg = Message(label or self.cfg.label, int(origin), seq)
        self.metrics.record_mined(origin)
        self.nodes[origin].gossip.accept_new(msg)
        return msg

    def run(self):
        logger.info("Starting run: nodes=%d peers=%d stop_time=%s transport=%s seed=%s",
                    self.n, self.cfg.peers, self.cfg.stop_time, self.cfg.transport, self.seed)
        if self.cfg.single_sender:
            self.nodes[0].start(delay=min(1.0, max(self.cfg.mining_cutoff, 0.0) / 2))
        else:
            for node in self.nodes:
                node.start()

        self.scheduler.run(self.cfg.stop_time)

        for node in self.nodes:
            node.stop()
        logger.info("Run finished at t=%s: %d events, %d mined, %d unique", self.scheduler.now,
                    self.scheduler.dispatched, self.metrics.total_mined, self.metrics.unique_messages)

        if self.cfg.outdir:
            self.metrics.write(self.cfg.outdir, summary_extra={
                # config snapshot
                "peers": self.cfg.peers,
                "stop_time": self.cfg.stop_time,
                "drain_margin": self.cfg.drain_margin,
                "forward_delay_min": self.cfg.forward_delay_min,
                "forward_delay_max": self.cfg.forward_delay_max,
                "link_latency_min": self.cfg.link_latency_min,
                "link_latency_max": self.cfg.link_latency_max,
                "transport": self.cfg.transport,
                "linger": self.cfg.linger,
                "connect_failure_rate": self.cfg.connect_failure_rate,
                "key_mode": self.cfg.key_mode,
                "single_sender": self.cfg.single_sender,
                "seed": self.seed,
                "events_dispatched": self.scheduler.dispatched,
            })
        return self.metrics

    def report(self, verbose=False):
        origins = {k: Message.decode(k.encode("utf-8")).origin for k in self.metrics.keys()}
        text = format_report(self.metrics, self.n, reach=reach_counts(self.peers), origins=origins)
        if verbose:
            text += "\n\n" + format_node_details([node.gossip for node in self.nodes])
        return text

import logging

from .message import Message

logger = logging.getLogger(__name__)


class GossipNode:
    """
    Per-node flood/gossip state.

    A message is marked forwarded the moment it is first accepted, before its
    fan-out round is scheduled, so each node relays each message at most once
    however many copies arrive while the round is pending.
    """
    def __init__(self, node_id, scheduler, rng, link, metrics,
                 forward_delay_min=0.010, forward_delay_max=0.030):
        self.node_id = int(node_id)
        self.scheduler = scheduler
        self.rng = rng
        self.link = link
        self.metrics = metrics
        self.forward_delay_min = float(forward_delay_min)
        self.forward_delay_max = float(forward_delay_max)

        self.peers: list["GossipNode"] = []
        self.received: set[str] = set()
        self.forwarded: set[str] = set()

    def connect(self, peers):
        self.peers = [p for p in peers if p is not self]

    def forward_delay(self):
        return float(self.rng.uniform(self.forward_delay_min, self.forward_delay_max))

    def receive(self, message: Message, sender=None, hops=0) -> bool:
        """Accept a copy of message. Returns False for a duplicate."""
        key = message.key
        if key in self.received:
            self.metrics.record_duplicate()
            return False

        self._accept(key, sender, hops)
        self.forwarded.add(key)
        self.scheduler.schedule(self.forward_delay(), self.node_id, self._fan_out, message, sender, hops)
        return True

    def accept_new(self, message: Message) -> bool:
        """Inject a locally mined message; it goes to every peer."""
        return self.receive(message, sender=None, hops=0)

    def deliver(self, payload: bytes, sender, hops):
        """Byte-level entry point for connection-oriented links."""
        if not payload:
            self.metrics.dropped_payloads += 1
            return False
        try:
            message = Message.decode(payload)
        except ValueError:
            # covers UnicodeDecodeError too
            logger.debug("node %d dropped malformed payload %r from %s", self.node_id, payload, sender)
            self.metrics.dropped_payloads += 1
            return False
        return self.receive(message, sender, hops)

    def forward(self, message: Message, sender=None, hops=0) -> int:
        """Relay message right away unless this node already relayed it."""
        key = message.key
        if key in self.forwarded:
            return 0
        if key not in self.received:
            self._accept(key, sender, hops)
        self.forwarded.add(key)
        return self._fan_out(message, sender, hops)

    def _accept(self, key, sender, hops):
        self.received.add(key)
        self.metrics.record(key, self.node_id, hops, self.scheduler.now)
        logger.debug("[t=%.3f] node %d got %s from %s (hops=%d)", self.scheduler.now, self.node_id, key, sender, hops)

    def _fan_out(self, message, sender, hops):
        sent = 0
        for peer in self.peers:
            if sender is not None and peer.node_id == sender:
                continue
            self.link.send(self.node_id, peer, message, hops + 1)
            sent += 1
        return sent

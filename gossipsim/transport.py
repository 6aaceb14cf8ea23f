"""
Forwarding hops between gossip nodes.

DirectLink delivers a message after one link-latency draw. SessionLink
models each hop as its own short-lived connection (TransportSession):
connect, send the encoded payload once connected, then linger before
closing. Sessions are never reused; one per (sender, message, target).
"""
import logging
from enum import Enum

logger = logging.getLogger(__name__)


class SessionState(Enum):
    CONNECTING = "connecting"
    CONNECTED = "connected"
    CLOSED = "closed"


class SessionStateError(RuntimeError):
    pass


class TransportSession:
    def __init__(self, scheduler, sender_id, target, message, hops, linger=30.0, on_closed=None):
        self.scheduler = scheduler
        self.sender_id = int(sender_id)
        self.target = target
        self.payload = message.encode()
        self.hops = int(hops)
        self.linger = float(linger)
        self.on_closed = on_closed
        self.state = SessionState.CONNECTING
        self.delivered = False
        self._close_event = None

    def _require(self, *states):
        if self.state not in states:
            raise SessionStateError(f"session {self.sender_id}->{self.target.node_id} is {self.state.value}")

    def open(self, connect_delay, fail=False):
        """Issue the connect request; the outcome arrives after connect_delay."""
        self._require(SessionState.CONNECTING)
        outcome = self.on_connect_failed if fail else self.on_connected
        self.scheduler.schedule(connect_delay, self.target.node_id, outcome)

    def on_connected(self):
        self._require(SessionState.CONNECTING)
        self.state = SessionState.CONNECTED
        payload, self.payload = self.payload, None
        self.delivered = True
        self.target.deliver(payload, self.sender_id, self.hops)
        self._close_event = self.scheduler.schedule(self.linger, self.sender_id, self.close)

    def on_connect_failed(self):
        # unreachable peer: drop this edge, no retry
        self._require(SessionState.CONNECTING)
        logger.debug("Connect %d->%d failed, dropping edge", self.sender_id, self.target.node_id)
        self._finish()

    def close(self):
        if self.state is SessionState.CLOSED:
            return
        self._require(SessionState.CONNECTED)
        self._finish()

    def _finish(self):
        self.state = SessionState.CLOSED
        self.payload = None
        self.scheduler.cancel(self._close_event)
        self._close_event = None
        if self.on_closed is not None:
            self.on_closed(self)


class DirectLink:
    def __init__(self, scheduler, rng, latency_min, latency_max, metrics=None):
        self.scheduler = scheduler
        self.rng = rng
        self.latency_min, self.latency_max = float(latency_min), float(latency_max)
        self.metrics = metrics

    def latency(self):
        return float(self.rng.uniform(self.latency_min, self.latency_max))

    def send(self, sender_id, target, message, hops):
        if self.metrics is not None:
            self.metrics.record_send()
        self.scheduler.schedule(self.latency(), target.node_id, target.receive, message, sender_id, hops)


class SessionLink(DirectLink):
    def __init__(self, scheduler, rng, latency_min, latency_max, metrics=None,
                 linger=30.0, connect_failure_rate=0.0):
        super().__init__(scheduler, rng, latency_min, latency_max, metrics)
        self.linger = float(linger)
        self.connect_failure_rate = float(connect_failure_rate)
        self.open_sessions = set()

    def send(self, sender_id, target, message, hops):
        if self.metrics is not None:
            self.metrics.record_send()
            self.metrics.sessions_opened += 1
        s = TransportSession(self.scheduler, sender_id, target, message, hops,
                             linger=self.linger, on_closed=self._closed)
        self.open_sessions.add(s)
        fail = self.connect_failure_rate > 0 and self.rng.random() < self.connect_failure_rate
        s.open(self.latency(), fail=fail)
        return s

    def _closed(self, s):
        self.open_sessions.discard(s)
        if self.metrics is not None:
            self.metrics.sessions_closed += 1
            if not s.delivered:
                self.metrics.connect_failures += 1

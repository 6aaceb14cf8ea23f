import logging
from enum import Enum

from .message import Message

logger = logging.getLogger(__name__)


class MinerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class MinerProcess:
    """
    Periodic share producer for one node.

    Mining stops at cutoff (stop_time - drain_margin) so that shares mined
    late still have time to propagate before the run ends.
    """
    def __init__(self, node, scheduler, rng, metrics, cutoff,
                 interval_min=10.0, interval_max=14.0, startup_jitter=10.0,
                 label="Block", key_mode="seq", max_blocks=None):
        self.node = node
        self.scheduler = scheduler
        self.rng = rng
        self.metrics = metrics
        self.cutoff = float(cutoff)
        self.interval_min, self.interval_max = float(interval_min), float(interval_max)
        self.startup_jitter = float(startup_jitter)
        self.label = label
        self.key_mode = key_mode
        self.max_blocks = max_blocks

        self.state = MinerState.IDLE
        self.mined = 0
        self._event = None

    @property
    def node_id(self):
        return self.node.node_id

    def start(self, delay=None):
        if self.state is not MinerState.IDLE:
            return
        self.state = MinerState.RUNNING
        if delay is None:
            delay = float(self.rng.uniform(0.0, self.startup_jitter)) if self.startup_jitter > 0 else 0.0
        logger.debug("Miner %d starts in %.3fs", self.node_id, delay)
        self._schedule(delay)

    def stop(self):
        if self.state is MinerState.STOPPED:
            return
        self.scheduler.cancel(self._event)
        self._event = None
        self.state = MinerState.STOPPED

    def _schedule(self, delay):
        if self.scheduler.now + delay >= self.cutoff:
            logger.debug("Miner %d will not mine further to allow propagation", self.node_id)
            self.stop()
            return
        self._event = self.scheduler.schedule(delay, self.node_id, self._mine)

    def _mine(self):
        self._event = None
        if self.state is not MinerState.RUNNING:
            return
        now = self.scheduler.now
        if now >= self.cutoff:
            self.stop()
            return

        self.mined += 1
        msg = Message.mined(self.label, self.node_id, self.mined, now, self.key_mode)
        logger.debug("[t=%.3f] miner %d mined %s", now, self.node_id, msg.key)
        self.metrics.record_mined(self.node_id)
        self.node.accept_new(msg)

        if self.max_blocks is not None and self.mined >= self.max_blocks:
            self.stop()
            return
        self._schedule(float(self.rng.uniform(self.interval_min, self.interval_max)))

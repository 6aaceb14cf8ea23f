from dataclasses import dataclass


class ConfigError(ValueError):
    """Raised for a configuration the simulation must not start with."""


# (forward_delay_min, forward_delay_max, link_latency_min, link_latency_max), seconds
LATENCY_PRESETS = {
    "light": (0.010, 0.030, 0.010, 0.030),
    "heavy": (0.010, 0.030, 0.050, 1.050),
}


@dataclass
class SimConfig:
    # Scale & time
    nodes: int = 20
    peers: int = 8
    stop_time: float = 60.0
    drain_margin: float = 20.0   # mining stops this many seconds before stop_time

    # Gossip latency
    # forward_delay: receipt -> fan-out; link_latency: per edge, sender -> receiver
    forward_delay_min: float = 0.010
    forward_delay_max: float = 0.030
    link_latency_min: float = 0.050
    link_latency_max: float = 1.050

    # Mining
    mining_interval_min: float = 10.0
    mining_interval_max: float = 14.0
    startup_jitter: float = 10.0
    label: str = "Block"
    key_mode: str = "seq"        # 'seq' or 'time'
    single_sender: bool = False  # only node 0 mines, once

    # Transport
    transport: str = "direct"    # 'direct' or 'session'
    linger: float = 30.0
    connect_failure_rate: float = 0.0

    # Random seed (None: system entropy, drawn once)
    seed: int | None = 42

    # Output
    outdir: str | None = None

    @property
    def mining_cutoff(self) -> float:
        return self.stop_time - self.drain_margin

    def apply_latency(self, preset: str):
        try:
            fmin, fmax, lmin, lmax = LATENCY_PRESETS[preset]
        except KeyError:
            raise ConfigError(f"unknown latency preset {preset!r}") from None
        self.forward_delay_min, self.forward_delay_max = fmin, fmax
        self.link_latency_min, self.link_latency_max = lmin, lmax
        return self

    def validate(self):
        if self.nodes < 1:
            raise ConfigError(f"nodes must be >= 1, got {self.nodes}")
        if self.peers < 0:
            raise ConfigError(f"peers must be >= 0, got {self.peers}")
        # rejection sampling of peers never terminates otherwise
        if self.peers >= self.nodes:
            raise ConfigError(f"peers ({self.peers}) must be < nodes ({self.nodes})")
        if self.stop_time <= 0:
            raise ConfigError(f"stop_time must be > 0, got {self.stop_time}")
        if self.drain_margin < 0:
            raise ConfigError(f"drain_margin must be >= 0, got {self.drain_margin}")
        for name in ("forward_delay", "link_latency", "mining_interval"):
            lo, hi = getattr(self, name + "_min"), getattr(self, name + "_max")
            if lo < 0 or hi < lo:
                raise ConfigError(f"{name} window must satisfy 0 <= min <= max, got [{lo}, {hi}]")
        if self.mining_interval_max <= 0:
            raise ConfigError("mining interval must be positive")
        if self.startup_jitter < 0:
            raise ConfigError(f"startup_jitter must be >= 0, got {self.startup_jitter}")
        if self.key_mode not in ("seq", "time"):
            raise ConfigError(f"key_mode must be 'seq' or 'time', got {self.key_mode!r}")
        if self.transport not in ("direct", "session"):
            raise ConfigError(f"transport must be 'direct' or 'session', got {self.transport!r}")
        if self.linger < 0:
            raise ConfigError(f"linger must be >= 0, got {self.linger}")
        if not 0.0 <= self.connect_failure_rate <= 1.0:
            raise ConfigError(f"connect_failure_rate must be in [0, 1], got {self.connect_failure_rate}")
        if not self.label:
            raise ConfigError(f"label must be a non-empty string, got {self.label!r}")
        return self

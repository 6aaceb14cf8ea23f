from dataclasses import dataclass


@dataclass(frozen=True, eq=False)
class Message:
    """
    A mined share/block.

    The key "<label>_<origin>_<seq>" is both the wire payload and the dedup
    key: two messages formatting to the same key are the same gossip item.
    seq is the miner's counter, or its mining time when keyed by time.
    """
    label: str
    origin: int
    seq: int | float

    @classmethod
    def mined(cls, label, origin, counter, now, key_mode="seq"):
        if key_mode == "time":
            return cls(label, int(origin), float(now))
        return cls(label, int(origin), int(counter))

    @property
    def key(self) -> str:
        seq = f"{self.seq:.6f}" if isinstance(self.seq, float) else str(self.seq)
        return f"{self.label}_{self.origin}_{seq}"

    def encode(self) -> bytes:
        return self.key.encode("utf-8")

    @classmethod
    def decode(cls, payload: bytes) -> "Message":
        text = payload.decode("utf-8")
        label, origin, seq = text.rsplit("_", 2)
        if not label:
            raise ValueError(f"malformed message {text!r}")
        return cls(label, int(origin), float(seq) if "." in seq else int(seq))

    def __eq__(self, other):
        if not isinstance(other, Message):
            return NotImplemented
        return self.key == other.key

    def __hash__(self):
        return hash(self.key)

    def __str__(self):
        return self.key

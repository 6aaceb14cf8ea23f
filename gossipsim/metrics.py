import csv, json, os
from collections import Counter

import numpy as np


class Metrics:
    """
    Run-wide propagation statistics.

    One receipt row (key, node, hops, time) per (message, node) pair, appended
    when the node first accepts the message. Rows are never changed afterwards.
    """
    def __init__(self, nodes: int):
        self.nodes = int(nodes)

        self.receipts = []                 # (time, key, node, hops)
        self._receivers = {}               # key -> {node: index into receipts}
        self._order = []                   # keys in first-seen order

        self.mined_per_node = Counter()
        self.total_mined = 0

        # Totals
        self.duplicates = 0
        self.sends = 0
        self.sessions_opened = 0
        self.sessions_closed = 0
        self.connect_failures = 0
        self.dropped_payloads = 0

    # === Write side ===
    def record(self, key, node, hops, time=0.0):
        node = int(node)
        rcv = self._receivers.get(key)
        if rcv is None:
            rcv = self._receivers[key] = {}
            self._order.append(key)
        if node in rcv:
            raise ValueError(f"node {node} already recorded for {key}")
        rcv[node] = len(self.receipts)
        self.receipts.append((float(time), key, node, int(hops)))

    def record_mined(self, node):
        self.mined_per_node[int(node)] += 1
        self.total_mined += 1

    def record_duplicate(self):
        self.duplicates += 1

    def record_send(self, n=1):
        self.sends += int(n)

    # === Read side ===
    @property
    def unique_messages(self) -> int:
        return len(self._order)

    def keys(self):
        return list(self._order)

    def receivers(self, key):
        return list(self._receivers.get(key, ()))

    def receiver_count(self, key) -> int:
        return len(self._receivers.get(key, ()))

    def hop_counts(self, key):
        return [self.receipts[i][3] for i in self._receivers.get(key, {}).values()]

    def mean_hops(self, key) -> float:
        hops = self.hop_counts(key)
        return float(np.mean(hops)) if hops else float("nan")

    def is_fully_propagated(self, key) -> bool:
        return self.receiver_count(key) == self.nodes

    def fully_propagated_count(self) -> int:
        return sum(1 for k in self._order if self.is_fully_propagated(k))

    def partially_propagated_count(self) -> int:
        return self.unique_messages - self.fully_propagated_count()

    def time_to_coverage(self, key, frac):
        """Virtual time at which key first reached frac of all nodes, or None."""
        target = int(np.ceil(frac * self.nodes))
        times = sorted(self.receipts[i][0] for i in self._receivers.get(key, {}).values())
        if target <= 0:
            return times[0] if times else None
        return times[target - 1] if len(times) >= target else None

    def message_rows(self):
        rows = []
        for key in self._order:
            origin_time = self.receipts[next(iter(self._receivers[key].values()))][0]
            t_full = self.time_to_coverage(key, 1.0)
            rows.append(dict(
                key=key,
                receivers=self.receiver_count(key),
                full=self.is_fully_propagated(key),
                mean_hops=self.mean_hops(key),
                max_hops=max(self.hop_counts(key)),
                t_mined=origin_time,
                t_full=t_full,
            ))
        return rows

    def summary(self):
        return {
            "nodes": self.nodes,
            "total_mined": self.total_mined,
            "unique_messages": self.unique_messages,
            "fully_propagated": self.fully_propagated_count(),
            "partially_propagated": self.partially_propagated_count(),
            "total_receipts": len(self.receipts),
            "duplicates": self.duplicates,
            "sends": self.sends,
            "sessions_opened": self.sessions_opened,
            "sessions_closed": self.sessions_closed,
            "connect_failures": self.connect_failures,
            "dropped_payloads": self.dropped_payloads,
            "mined_per_node": {str(k): v for k, v in sorted(self.mined_per_node.items())},
        }

    def write(self, outdir, summary_extra=None):
        os.makedirs(outdir, exist_ok=True)

        # receipts
        with open(os.path.join(outdir, "receipts.csv"), "w", newline="", encoding="utf-8") as f:
            w = csv.writer(f)
            w.writerow(["time", "key", "node", "hops"])
            for r in self.receipts:
                w.writerow(list(r))

        # per-message coverage
        with open(os.path.join(outdir, "messages.csv"), "w", newline="", encoding="utf-8") as f:
            fields = ["key", "receivers", "full", "mean_hops", "max_hops", "t_mined", "t_full"]
            w = csv.DictWriter(f, fieldnames=fields)
            w.writeheader()
            for row in self.message_rows():
                w.writerow(row)

        summary = self.summary()
        if summary_extra:
            summary.update(summary_extra)

        with open(os.path.join(outdir, "summary.json"), "w", encoding="utf-8") as f:
            json.dump(summary, f, indent=2)

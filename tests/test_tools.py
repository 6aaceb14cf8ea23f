"""Tests for merging per-run summaries into one table."""

import math

import pandas as pd
import pytest

from gossipsim.metrics import Metrics
from tools.collect_summaries import load_summaries, main


def write_run(root, name, nodes, mined, full, extra):
    m = Metrics(nodes=nodes)
    for u in mined:
        m.record_mined(u)
    for i, origin in enumerate(mined):
        key = f"Block_{origin}_{i + 1}"
        receivers = range(nodes) if i < full else [origin]
        for node in receivers:
            m.record(key, node, 0 if node == origin else 1, float(i))
    m.write(str(root / name), summary_extra=extra)


@pytest.fixture
def runs(tmp_path):
    write_run(tmp_path, "heavy", 4, [0, 0, 2], 2, {"peers": 2, "transport": "direct", "seed": 1})
    write_run(tmp_path, "light", 3, [1], 1, {"peers": 1, "transport": "session", "seed": 2})
    write_run(tmp_path, "quiet", 3, [], 0, {"peers": 1, "transport": "direct", "seed": 3})
    return tmp_path


class TestLoadSummaries:
    """Reading run folders"""

    def test_one_row_per_run(self, runs):
        df = load_summaries(runs)
        assert list(df["run"]) == ["heavy", "light", "quiet"]
        assert list(df.columns[:5]) == ["run", "nodes", "peers", "transport", "seed"]
        assert "mined_per_node" not in df.columns
        assert list(df["miners"]) == [2, 1, 0]

    def test_full_fraction(self, runs):
        df = load_summaries(runs).set_index("run")
        assert df.loc["heavy", "full_frac"] == pytest.approx(2 / 3)
        assert df.loc["light", "full_frac"] == 1.0
        assert math.isnan(df.loc["quiet", "full_frac"])

    def test_empty_root(self, tmp_path):
        assert load_summaries(tmp_path).empty


def test_main_writes_csv(runs, tmp_path, capsys):
    out = tmp_path / "merged" / "all.csv"
    main(["--root", str(runs), "--out", str(out)])
    assert "Wrote 3 rows" in capsys.readouterr().out
    df = pd.read_csv(out)
    assert list(df["total_mined"]) == [3, 1, 0]


def test_main_without_runs_exits(tmp_path):
    with pytest.raises(SystemExit, match="No summary.json found"):
        main(["--root", str(tmp_path), "--out", str(tmp_path / "x.csv")])

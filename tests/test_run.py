"""Tests for the command line entry point and configuration."""

import json

import pytest

from gossipsim.config import ConfigError, LATENCY_PRESETS, SimConfig
from gossipsim.run import main


def test_cli_prints_report(capsys):
    metrics = main(["--nodes", "10", "--peers", "3", "--stop_time", "30",
                    "--drain_margin", "10", "--seed", "7"])
    out = capsys.readouterr().out
    assert "=== GOSSIP NETWORK SUMMARY ===" in out
    assert "=== PROPAGATION REPORT ===" in out
    assert f"Total messages mined across network: {metrics.total_mined}" in out


def test_cli_verbose_prints_node_details(capsys):
    main(["--nodes", "5", "--peers", "2", "--stop_time", "30", "--latency", "light",
          "--single_sender", "--verbose"])
    out = capsys.readouterr().out
    assert "=== NODE DETAILS ===" in out
    for u in range(5):
        assert f"Neighbors of node {u}: " in out
        assert f"Node {u} received messages:" in out
    assert "  - Block_0_1" in out


def test_cli_writes_outputs(tmp_path, capsys):
    outdir = tmp_path / "out"
    main(["--nodes", "6", "--peers", "2", "--stop_time", "30", "--transport", "session",
          "--latency", "light", "--single_sender", "--outdir", str(outdir)])
    summary = json.loads((outdir / "summary.json").read_text(encoding="utf-8"))
    assert summary["nodes"] == 6
    assert summary["transport"] == "session"
    assert summary["total_mined"] == 1
    assert summary["link_latency_max"] == LATENCY_PRESETS["light"][3]
    assert "Done." in capsys.readouterr().out


def test_cli_rejects_degree_not_below_nodes(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--nodes", "8", "--peers", "8"])
    assert exc.value.code == 2
    assert "must be < nodes" in capsys.readouterr().err


class TestSimConfig:
    """SimConfig validation"""

    def test_defaults_are_valid(self):
        cfg = SimConfig().validate()
        assert cfg.mining_cutoff == 40.0

    def test_latency_presets(self):
        cfg = SimConfig().apply_latency("light")
        assert (cfg.link_latency_min, cfg.link_latency_max) == (0.010, 0.030)
        with pytest.raises(ConfigError):
            SimConfig().apply_latency("satellite")

    @pytest.mark.parametrize("field,value", [
        ("nodes", 0),
        ("peers", 20),
        ("stop_time", 0.0),
        ("drain_margin", -1.0),
        ("forward_delay_min", 1.0),
        ("link_latency_min", -0.1),
        ("key_mode", "hash"),
        ("transport", "udp"),
        ("connect_failure_rate", 1.5),
        ("label", ""),
    ])
    def test_invalid_values(self, field, value):
        cfg = SimConfig(**{field: value})
        with pytest.raises(ConfigError):
            cfg.validate()

"""Tests for the command line entry point."""
import json
import random
import signal

import pytest
from prometheus_client import CollectorRegistry

import main_analyzer
from staking_analytics.config import Config
from staking_analytics.errors import SourceFailure
from staking_analytics.monitoring.metrics import AnalyticsMetrics

ADDRESS = "ronin:abc123def456abc123def456abc123def456abcd"


@pytest.fixture(autouse=True)
def quiet_cli(monkeypatch):
    """No exporter, no simulated latency, no signal handlers, private metrics registry."""
    monkeypatch.setattr(Config, "METRICS_ENABLED", False)
    monkeypatch.setattr(Config, "SOURCE_DELAY_SECONDS", 0)
    monkeypatch.setattr(Config, "SOURCE_FAILURE_RATE", 0.0)
    monkeypatch.setattr(signal, "signal", lambda *args: None)
    monkeypatch.setattr(
        main_analyzer, "AnalyticsMetrics",
        lambda metrics_port=None: AnalyticsMetrics(registry=CollectorRegistry())
    )


def test_parse_args_defaults():
    args = main_analyzer.parse_args([ADDRESS])
    assert args.address == ADDRESS
    assert not args.json
    assert not args.watch
    assert args.count == 0
    assert args.interval == Config.WATCH_INTERVAL_SECONDS


def test_text_report(capsys):
    main_analyzer.main([ADDRESS])
    out = capsys.readouterr().out

    assert f"Staking analytics for {ADDRESS}" in out
    assert "Unique stakers:     5" in out
    assert "NFTs staked:        8" in out
    assert "Avg duration (d):   125" in out
    assert f"{ADDRESS}  nfts=2  days=200" in out


def test_json_report(capsys):
    main_analyzer.main([ADDRESS, "--json"])
    report = json.loads(capsys.readouterr().out)

    assert report['address'] == ADDRESS
    assert report['total_unique_stakers'] == 5
    assert report['total_nfts_staked'] == 8
    assert report['unique_stakers'][0]['nfts_staked'] == 3


def test_one_shot_failure_propagates(monkeypatch):
    monkeypatch.setattr(Config, "SOURCE_FAILURE_RATE", 1.0)
    with pytest.raises(SourceFailure):
        main_analyzer.main([ADDRESS])


def test_watch_keeps_polling_after_source_failure(monkeypatch, capsys, caplog):
    monkeypatch.setattr(Config, "SOURCE_FAILURE_RATE", 0.5)
    draws = iter([0.1, 0.9])
    monkeypatch.setattr(random, "random", lambda: next(draws))

    main_analyzer.main([ADDRESS, "--watch", "--interval", "0", "--count", "2"])

    assert "Poll 1 failed" in caplog.text
    assert capsys.readouterr().out.count("Staking analytics for") == 1


def test_watch_stops_after_count(capsys):
    main_analyzer.main([ADDRESS, "--watch", "--interval", "0", "--count", "3", "--json"])
    out = capsys.readouterr().out
    assert out.count('"total_unique_stakers": 5') == 3

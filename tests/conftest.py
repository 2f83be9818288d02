"""Shared test fixtures: fake clock, event factory, private metrics registry."""
import pytest
from prometheus_client import CollectorRegistry

from staking_analytics.analytics.aggregator import MS_PER_DAY
from staking_analytics.analytics.models import StakingEvent
from staking_analytics.monitoring.metrics import AnalyticsMetrics

T0 = 1_700_000_000_000


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start=T0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_event():
    def _make(staker, token_id, start_days_ago, end_days_ago=None, now=T0):
        return StakingEvent(
            staker=staker,
            token_id=token_id,
            staking_start_time=now - start_days_ago * MS_PER_DAY,
            staking_end_time=now - end_days_ago * MS_PER_DAY if end_days_ago is not None else None
        )
    return _make


@pytest.fixture
def registry():
    return CollectorRegistry()


@pytest.fixture
def metrics(registry):
    return AnalyticsMetrics(registry=registry)

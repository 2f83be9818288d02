import logging
import random
import time
from staking_analytics.analytics.aggregator import MS_PER_DAY, now_ms
from staking_analytics.analytics.models import StakingEvent
from staking_analytics.errors import SourceFailure

logger = logging.getLogger(__name__)


# (staker, token_id, started days ago, ended days ago or None if still staked)
MOCK_STAKES = [
    ("ronin:abc123def456abc123def456abc123def456abcd", "1001", 90, 10),
    ("ronin:abc123def456abc123def456abc123def456abcd", "1002", 120, None),
    ("ronin:5678abcd5678abcd5678abcd5678abcd5678abcd", "1003", 60, 30),
    ("ronin:5678abcd5678abcd5678abcd5678abcd5678abcd", "1004", 45, None),
    ("ronin:5678abcd5678abcd5678abcd5678abcd5678abcd", "1005", 30, None),
    ("ronin:9012efgh9012efgh9012efgh9012efgh9012efgh", "1006", 180, 90),
    ("ronin:3456ijkl3456ijkl3456ijkl3456ijkl3456ijkl", "1007", 200, None),
    ("ronin:7890mnop7890mnop7890mnop7890mnop7890mnop", "1008", 150, 120),
]


class MockStakingEventSource:
    """Stands in for a chain indexer; returns the same staking history for any address."""

    def __init__(self, delay_seconds=2.0, failure_rate=0.0, clock=None, sleep=time.sleep):
        self.delay_seconds = delay_seconds
        self.failure_rate = failure_rate
        self.clock = clock or now_ms
        self.sleep = sleep
        self.fetch_count = 0

    def _build_events(self, now):
        return [
            StakingEvent(
                staker=staker,
                token_id=token_id,
                staking_start_time=now - started * MS_PER_DAY,
                staking_end_time=now - ended * MS_PER_DAY if ended is not None else None
            )
            for staker, token_id, started, ended in MOCK_STAKES
        ]

    def fetch_staking_events(self, contract_address):
        self.fetch_count += 1

        try:
            if self.delay_seconds:
                self.sleep(self.delay_seconds)

            if self.failure_rate and random.random() < self.failure_rate:
                raise ConnectionError(f"Simulated indexer outage for {contract_address}")

            events = self._build_events(self.clock())
        except Exception as e:
            logger.error(f"Error fetching staking events: {e}")
            raise SourceFailure("Failed to fetch staking data from Ronin blockchain") from e

        logger.info(f"Fetched {len(events)} staking events for {contract_address}")
        return events

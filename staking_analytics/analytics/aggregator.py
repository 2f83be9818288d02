import logging
import math
import time
from staking_analytics.analytics.models import ProcessedStakingData, StakerSummary

logger = logging.getLogger(__name__)

MS_PER_DAY = 24 * 60 * 60 * 1000


def now_ms():
    return int(time.time() * 1000)


def round_half_up(value):
    """Round to the nearest integer, halves toward +infinity."""
    whole = math.floor(value)
    return int(whole) + (1 if value - whole >= 0.5 else 0)


class StakerAggregation:
    """Tracks distinct tokens and summed staking days for one staker."""

    def __init__(self, address):
        self.address = address
        self.token_ids = set()
        self.total_duration_days = 0.0

    def add_event(self, token_id, duration_days):
        self.token_ids.add(token_id)
        self.total_duration_days += duration_days

    def to_summary(self):
        return StakerSummary(
            address=self.address,
            nfts_staked=len(self.token_ids),
            total_duration_in_days=round_half_up(self.total_duration_days)
        )


class StakingAggregator:
    """Groups staking events by staker, in first-seen order."""

    def __init__(self, now=None):
        self.now = now if now is not None else now_ms()
        self.stakers = {}
        self.event_count = 0
        self.negative_duration_count = 0

    def add_event(self, event):
        # Open stakes end at self.now, fixed for the aggregator's lifetime
        end_time = event.staking_end_time if event.staking_end_time is not None else self.now
        if end_time < event.staking_start_time:
            self.negative_duration_count += 1

        if event.staker not in self.stakers:
            self.stakers[event.staker] = StakerAggregation(event.staker)

        duration_days = (end_time - event.staking_start_time) / MS_PER_DAY
        self.stakers[event.staker].add_event(event.token_id, duration_days)
        self.event_count += 1

    def add_events(self, events):
        for event in events:
            self.add_event(event)

    def result(self):
        if self.negative_duration_count:
            logger.warning(f"{self.negative_duration_count} events end before they start, "
                           f"counted as negative durations")

        summaries = [agg.to_summary() for agg in self.stakers.values()]
        summaries.sort(key=lambda s: s.nfts_staked, reverse=True)

        total_stakers = len(summaries)
        total_nfts = sum(s.nfts_staked for s in summaries)
        total_days = sum(s.total_duration_in_days for s in summaries)
        average = round_half_up(total_days / total_stakers) if total_stakers > 0 else 0

        return ProcessedStakingData(
            unique_stakers=summaries,
            total_unique_stakers=total_stakers,
            total_nfts_staked=total_nfts,
            average_staking_duration=average
        )

    def get_stats(self):
        return {
            'events': self.event_count,
            'stakers': len(self.stakers),
            'negative_durations': self.negative_duration_count,
            'now': self.now
        }


def aggregate(events, now=None):
    """Aggregate staking events into per-staker summaries and totals."""
    aggregator = StakingAggregator(now=now)
    aggregator.add_events(events)
    return aggregator.result()

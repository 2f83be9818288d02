import logging
import time
from staking_analytics.analytics.aggregator import aggregate
from staking_analytics.analytics.cache import TTLCache
from staking_analytics.errors import InvalidInput, SourceFailure

logger = logging.getLogger(__name__)


class StakingAnalyticsService:
    """Fetches, aggregates and caches staking analytics per contract address."""

    def __init__(self, source, cache=None, metrics=None, clock=None):
        self.source = source
        self.metrics = metrics
        self.cache = cache or TTLCache(clock=clock, metrics=metrics)
        self.clock = clock or self.cache.clock

    def _validate_address(self, contract_address):
        if contract_address is None or not str(contract_address).strip():
            raise InvalidInput("Please provide a valid Ronin address")
        return str(contract_address).strip()

    def analyze_staking_contract(self, contract_address):
        """Fetch events for the address and aggregate them, bypassing the cache."""
        address = self._validate_address(contract_address)

        fetch_start = time.time()
        try:
            events = self.source.fetch_staking_events(address)
        except SourceFailure as e:
            logger.error(f"Error analyzing staking contract {address}: {e}")
            if self.metrics:
                self.metrics.record_source_failure(type(e.__cause__ or e).__name__)
            raise
        if self.metrics:
            self.metrics.record_source_fetch_time(time.time() - fetch_start)
            self.metrics.record_events_fetched(len(events))

        agg_start = time.time()
        data = aggregate(events, now=self.clock())
        if self.metrics:
            self.metrics.record_aggregation_time(time.time() - agg_start)

        logger.info(f"Analyzed {address}: {data.total_unique_stakers} stakers, "
                    f"{data.total_nfts_staked} NFTs")
        return data

    def get_staking_data(self, contract_address):
        """Cached analytics for the address, refreshed once the entry is stale."""
        address = self._validate_address(contract_address)
        return self.cache.get_or_refresh(address, lambda: self.analyze_staking_contract(address))

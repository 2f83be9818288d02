import logging
from prometheus_client import REGISTRY, Counter, Histogram, Gauge, start_http_server

logger = logging.getLogger(__name__)


class AnalyticsMetrics:
    """Prometheus metrics for staking analytics observability."""

    def __init__(self, metrics_port=None, registry=REGISTRY):
        self.registry = registry

        self.cache_hits = Counter('cache_hits_total', 'Cache lookups served from a fresh entry',
                                  registry=registry)
        self.cache_misses = Counter('cache_misses_total', 'Cache lookups that needed a refresh',
                                    registry=registry)
        self.cache_refreshes = Counter('cache_refreshes_total', 'Cache refreshes', ['outcome'],
                                       registry=registry)
        self.cached_entries = Gauge('cached_entries', 'Entries held in the staking data cache',
                                    registry=registry)

        self.events_fetched = Counter('events_fetched_total', 'Staking events fetched from the source',
                                      registry=registry)
        self.source_failures = Counter('source_failures_total', 'Event source failures', ['error_type'],
                                       registry=registry)
        self.source_fetch_latency = Histogram(
            'source_fetch_duration_seconds', 'Event source fetch time',
            buckets=[0.01, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
            registry=registry
        )
        self.aggregation_latency = Histogram(
            'aggregation_duration_seconds', 'Aggregation time',
            buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1],
            registry=registry
        )

        if metrics_port is not None:
            try:
                start_http_server(metrics_port, addr="0.0.0.0", registry=registry)
                logger.info(f"Metrics server on port {metrics_port}")
            except Exception as e:
                logger.warning(f"Metrics server failed: {e}")

    def record_cache_hit(self):
        self.cache_hits.inc()

    def record_cache_miss(self):
        self.cache_misses.inc()

    def record_cache_refresh(self, outcome):
        self.cache_refreshes.labels(outcome=outcome).inc()

    def set_cached_entries(self, count):
        self.cached_entries.set(count)

    def record_events_fetched(self, count):
        self.events_fetched.inc(count)

    def record_source_failure(self, error_type):
        self.source_failures.labels(error_type=error_type).inc()

    def record_source_fetch_time(self, duration):
        self.source_fetch_latency.observe(duration)

    def record_aggregation_time(self, duration):
        self.aggregation_latency.observe(duration)

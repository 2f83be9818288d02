#!/usr/bin/env python3

import argparse
import json
import logging
import signal
import sys
import time
from staking_analytics.analytics.cache import TTLCache
from staking_analytics.config import Config
from staking_analytics.errors import SourceFailure, StakingAnalyticsError
from staking_analytics.monitoring.metrics import AnalyticsMetrics
from staking_analytics.service import StakingAnalyticsService
from staking_analytics.source.simulator import MockStakingEventSource

logging.basicConfig(level=Config.LOG_LEVEL, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

running = True


def signal_handler(sig, frame):
    global running
    logger.info("Shutting down...")
    running = False


def print_report(address, data, as_json=False):
    if as_json:
        print(json.dumps({'address': address, **data.model_dump()}, indent=2))
        return

    print(f"Staking analytics for {address}")
    print(f"  Unique stakers:     {data.total_unique_stakers}")
    print(f"  NFTs staked:        {data.total_nfts_staked}")
    print(f"  Avg duration (d):   {data.average_staking_duration}")
    for staker in data.unique_stakers:
        print(f"  {staker.address}  nfts={staker.nfts_staked}  days={staker.total_duration_in_days}")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Per-staker analytics for an NFT staking contract")
    parser.add_argument("address", help="contract address, e.g. ronin:<40 hex chars>")
    parser.add_argument("--json", action="store_true", help="print the result as JSON")
    parser.add_argument("--watch", action="store_true", help="keep polling the address")
    parser.add_argument("--interval", type=float, default=Config.WATCH_INTERVAL_SECONDS,
                        help="poll interval in seconds for --watch")
    parser.add_argument("--count", type=int, default=0,
                        help="stop --watch after this many polls (0 polls forever)")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    metrics = AnalyticsMetrics(metrics_port=Config.METRICS_PORT if Config.METRICS_ENABLED else None)
    source = MockStakingEventSource(
        delay_seconds=Config.SOURCE_DELAY_SECONDS,
        failure_rate=Config.SOURCE_FAILURE_RATE
    )
    cache = TTLCache(ttl_ms=Config.CACHE_TTL_SECONDS * 1000, metrics=metrics)
    service = StakingAnalyticsService(source, cache=cache, metrics=metrics)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    polls = 0
    while True:
        polls += 1
        try:
            data = service.get_staking_data(args.address)
            print_report(args.address, data, as_json=args.json)
        except SourceFailure as e:
            if not args.watch:
                raise
            logger.error(f"Poll {polls} failed: {e}")

        if not args.watch or (args.count and polls >= args.count):
            break

        logger.debug(f"Cache stats: {service.cache.get_stats()}")
        deadline = time.time() + args.interval
        while running and time.time() < deadline:
            time.sleep(0.5)
        if not running:
            break


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("Interrupted")
    except StakingAnalyticsError as e:
        logger.error(f"Failed to fetch staking data: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)

class StakingAnalyticsError(Exception):
    """Base class for staking analytics errors."""
    pass


class SourceFailure(StakingAnalyticsError):
    """Event source could not deliver staking events (network, timeout, not found)."""
    pass


class InvalidInput(StakingAnalyticsError):
    """Caller did not supply a usable contract address."""
    pass

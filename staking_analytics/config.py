import os
from dotenv import load_dotenv

load_dotenv()


def _get_env(key, default=None):
    val = os.getenv(key, default)
    if val is None:
        raise ValueError(f"Missing required env var: {key}")
    return val


def _get_env_int(key, default=None):
    val = os.getenv(key)
    return int(val) if val else default


def _get_env_float(key, default=None):
    val = os.getenv(key)
    return float(val) if val else default


class Config:
    """Application configuration from environment variables."""
    
    CACHE_TTL_SECONDS = _get_env_int("CACHE_TTL_SECONDS", 300)
    
    SOURCE_DELAY_SECONDS = _get_env_float("SOURCE_DELAY_SECONDS", 2.0)
    SOURCE_FAILURE_RATE = _get_env_float("SOURCE_FAILURE_RATE", 0.0)
    
    METRICS_PORT = _get_env_int("METRICS_PORT", 8003)
    METRICS_ENABLED = os.getenv("METRICS_ENABLED", "true").lower() == "true"
    
    WATCH_INTERVAL_SECONDS = _get_env_float("WATCH_INTERVAL_SECONDS", 30.0)
    LOG_LEVEL = _get_env("LOG_LEVEL", "INFO")

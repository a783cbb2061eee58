"""Prometheus metrics for the service layer."""
import logging
from typing import Optional, Type

from prometheus_client import Counter

from driver_compliance.config.settings import Config

logger = logging.getLogger(__name__)

_metrics_enabled: bool = Config.ENABLE_METRICS

# Prometheus metrics
cache_requests_total = Counter(
    'cache_requests_total',
    'Total number of cache-aside lookups',
    ['cache', 'result']
)

cache_invalidations_total = Counter(
    'cache_invalidations_total',
    'Total number of cache invalidations',
    ['cache']
)

driver_auth_events_total = Counter(
    'driver_auth_events_total',
    'Total number of driver authentication events',
    ['event', 'status']
)

workday_mutations_total = Counter(
    'workday_mutations_total',
    'Total number of workday mutations',
    ['operation']
)


def register_metrics(config: Optional[Type[Config]] = None) -> None:
    """
    Turn metric tracking on or off for the active configuration.

    Args:
        config: Configuration class (defaults to ``Config``)
    """
    global _metrics_enabled
    _metrics_enabled = bool((config or Config).ENABLE_METRICS)
    logger.info(f"Prometheus metrics {'enabled' if _metrics_enabled else 'disabled'}")


def track_cache_request(cache: str, hit: bool) -> None:
    """
    Track a cache-aside lookup.

    Args:
        cache: Cache name (e.g. 'workday_month')
        hit: Whether the value was served from the cache
    """
    try:
        if _metrics_enabled:
            cache_requests_total.labels(cache=cache, result="hit" if hit else "miss").inc()
    except Exception as e:
        logger.debug(f"Failed to track cache request metrics: {e}")


def track_cache_invalidation(cache: str) -> None:
    try:
        if _metrics_enabled:
            cache_invalidations_total.labels(cache=cache).inc()
    except Exception as e:
        logger.debug(f"Failed to track cache invalidation metrics: {e}")


def track_auth_event(event: str, success: bool) -> None:
    """
    Track a driver authentication event.

    Args:
        event: Event name ('signup', 'login', 'verify', 'refresh')
        success: Whether the event succeeded
    """
    try:
        if _metrics_enabled:
            status = "success" if success else "error"
            driver_auth_events_total.labels(event=event, status=status).inc()
    except Exception as e:
        logger.debug(f"Failed to track auth event metrics: {e}")


def track_workday_mutation(operation: str) -> None:
    try:
        if _metrics_enabled:
            workday_mutations_total.labels(operation=operation).inc()
    except Exception as e:
        logger.debug(f"Failed to track workday mutation metrics: {e}")

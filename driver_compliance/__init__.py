"""Service layer factory with dependency injection."""
import logging
import sys
from typing import Optional, Type

from driver_compliance.config.settings import Config, get_config
from driver_compliance.infrastructure.service_container import ServiceContainer


async def create_container(config_class: Optional[Type[Config]] = None) -> ServiceContainer:
    """
    Create and configure the service container.

    Args:
        config_class: Optional configuration class (for testing)

    Returns:
        Configured ServiceContainer; close it with ``await container.close()``

    Raises:
        ValueError: If a required setting is missing
    """
    config = config_class or get_config()

    # Configure logging FIRST (needed for all subsequent operations)
    configure_logging(config)
    _logger = logging.getLogger(__name__)

    try:
        config.validate()
    except ValueError as e:
        _logger.critical(f"Configuration validation failed: {e}")
        raise

    container = await ServiceContainer.create(config)
    _logger.info("=== Service container ready ===")
    return container


def configure_logging(config: Optional[Type[Config]] = None) -> None:
    """Configure application logging."""
    config = config or Config
    logging.basicConfig(
        level=logging.DEBUG if config.DEBUG else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
        force=True
    )


__all__ = [
    "create_container",
    "configure_logging",
    "ServiceContainer",
]

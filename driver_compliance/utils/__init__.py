"""Utility helpers shared across layers."""
from driver_compliance.utils.clock import utcnow, utctoday
from driver_compliance.utils.identity_normalizer import DriverIdentityNormalizer

__all__ = [
    "utcnow",
    "utctoday",
    "DriverIdentityNormalizer",
]

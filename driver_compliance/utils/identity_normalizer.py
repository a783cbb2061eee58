"""Normalization of driver identity fields."""
import re
from typing import Pattern


class DriverIdentityNormalizer:
    """Utility class for normalizing names and emails before storage."""

    # Names are split on any whitespace run or hyphen
    NAME_SEPARATOR_PATTERN: Pattern = re.compile(r"[\s\-]+")

    @classmethod
    def title_case(cls, name: str) -> str:
        """
        Title-case a name, joining its parts with hyphens.

        Args:
            name: Raw name (e.g. "jean  PIERRE")

        Returns:
            Normalized name (e.g. "Jean-Pierre")
        """
        parts = [part for part in cls.NAME_SEPARATOR_PATTERN.split(name.strip()) if part]
        return "-".join(part[0].upper() + part[1:].lower() for part in parts)

    @staticmethod
    def normalize_email(email: str) -> str:
        return email.strip().lower()

    @staticmethod
    def email_domain(email: str) -> str:
        """Return the part after the last '@' (empty when there is none)."""
        _, separator, domain = email.rpartition("@")
        return domain if separator else ""

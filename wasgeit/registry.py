"""
Venue registry: short venue key -> static venue metadata.

Built once at startup from the venue configuration and read-only afterwards.
"""

from types import MappingProxyType
from typing import Any, Iterator, Optional

import structlog

from .config import get_default_config
from .errors import ConfigurationError
from .models import Venue

logger = structlog.get_logger()


class VenueRegistry:
    """Read-only lookup table of venues, in declaration order."""

    def __init__(self, venues: list[Venue]):
        by_key: dict[str, Venue] = {}
        duplicates = []
        for venue in venues:
            if venue.short_name in by_key:
                duplicates.append(f"Duplicate venue key: {venue.short_name}")
                continue
            by_key[venue.short_name] = venue

        if duplicates:
            raise ConfigurationError(duplicates)

        self._venues = MappingProxyType(by_key)

    def lookup(self, short_name: str) -> Optional[Venue]:
        """Return the venue for short_name, or None if unknown."""
        return self._venues.get(short_name)

    def require(self, short_name: str) -> Venue:
        """Return the venue for short_name.

        Only meant for adapter construction at startup, where an unknown key
        is a mistake in the adapter table.

        Raises:
            ConfigurationError: If the key is not registered
        """
        venue = self._venues.get(short_name)
        if venue is None:
            raise ConfigurationError([f"Unknown venue key: {short_name}"])
        return venue

    def keys(self) -> list[str]:
        return list(self._venues)

    def __contains__(self, short_name: object) -> bool:
        return short_name in self._venues

    def __iter__(self) -> Iterator[Venue]:
        return iter(self._venues.values())

    def __len__(self) -> int:
        return len(self._venues)


def build_registry(config: Optional[dict[str, Any]] = None) -> VenueRegistry:
    """
    Build the venue registry from config.

    Args:
        config: Full config dict (see wasgeit.config); defaults if omitted

    Returns:
        Populated VenueRegistry

    Raises:
        ConfigurationError: On duplicate keys or malformed venue entries
    """
    config = config or get_default_config()
    entries = config.get("venues", [])

    try:
        venues = [Venue(**entry) for entry in entries]
    except (TypeError, ValueError) as e:
        raise ConfigurationError([f"Invalid venue entry: {e}"]) from e

    registry = VenueRegistry(venues)
    logger.debug("registry_built", venues=len(registry))
    return registry

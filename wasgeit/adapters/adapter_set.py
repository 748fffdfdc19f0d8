"""Read-only set of venue adapters, validated against the registry at startup."""

from types import MappingProxyType
from typing import Iterator, Optional

import structlog

from ..errors import ConfigurationError
from .base import VenueAdapter
from .venues import ADAPTER_CLASSES

logger = structlog.get_logger()


class AdapterSet:
    """Adapters keyed by venue short name, plus their declaration order."""

    def __init__(self, adapters: list[VenueAdapter]):
        self._ordered = tuple(adapters)
        self._by_key = MappingProxyType({a.venue_key: a for a in self._ordered})

    def adapter_for(self, short_name: str) -> Optional[VenueAdapter]:
        """Return the adapter for short_name, or None if there is none."""
        return self._by_key.get(short_name)

    def all(self) -> tuple[VenueAdapter, ...]:
        """All adapters in declaration order, for bulk crawling."""
        return self._ordered

    def keys(self) -> list[str]:
        return [a.venue_key for a in self._ordered]

    def __contains__(self, short_name: object) -> bool:
        return short_name in self._by_key

    def __iter__(self) -> Iterator[VenueAdapter]:
        return iter(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)


def build_adapter_set(
    registry,
    adapter_classes: Optional[tuple[type[VenueAdapter], ...]] = None,
) -> AdapterSet:
    """
    Instantiate every adapter and check it against the registry.

    All problems are collected first and raised together, so one run shows
    every broken entry in the adapter table.

    Args:
        registry: VenueRegistry holding the venue metadata
        adapter_classes: Adapter classes to build; defaults to all known venues

    Returns:
        AdapterSet with one adapter per venue

    Raises:
        ConfigurationError: On unknown venue keys or duplicate adapters
    """
    if adapter_classes is None:
        adapter_classes = ADAPTER_CLASSES

    adapters: list[VenueAdapter] = []
    problems: list[str] = []
    seen: set[str] = set()

    for cls in adapter_classes:
        if cls.venue_key in seen:
            problems.append(f"Duplicate adapter for venue: {cls.venue_key} ({cls.__name__})")
            continue
        seen.add(cls.venue_key)

        try:
            adapters.append(cls(registry))
        except ConfigurationError as e:
            problems.extend(f"{cls.__name__}: {p}" for p in e.problems)

    if problems:
        logger.error("adapter_set_invalid", problems=problems)
        raise ConfigurationError(problems)

    logger.debug("adapter_set_built", adapters=len(adapters))
    return AdapterSet(adapters)

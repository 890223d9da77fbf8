"""
DriverResolver - Maps names coming from the results feed onto the roster.

Injected into the feed client instead of living as a global: tests and
other seasons can pass their own roster and aliases.

Cascade:
1. Exact roster name
2. Alias table (API spellings)
3. Family name match against the roster
4. Unknown driver: keep the API full name and log it
"""

import logging
import unicodedata
from typing import Optional

from fantaf1.core.constants import (
    CONSTRUCTOR_ALIASES,
    CONSTRUCTORS,
    DRIVER_ALIASES,
    DRIVERS,
)

logger = logging.getLogger(__name__)


def _fold(name: str) -> str:
    """Case- and accent-insensitive comparison key."""
    decomposed = unicodedata.normalize("NFKD", name)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold().strip()


class DriverResolver:
    def __init__(
        self,
        drivers: Optional[list[str]] = None,
        constructors: Optional[list[str]] = None,
        driver_aliases: Optional[dict[str, str]] = None,
        constructor_aliases: Optional[dict[str, str]] = None
    ):
        drivers = drivers if drivers is not None else DRIVERS
        constructors = constructors if constructors is not None else CONSTRUCTORS
        driver_aliases = driver_aliases if driver_aliases is not None else DRIVER_ALIASES
        constructor_aliases = constructor_aliases if constructor_aliases is not None else CONSTRUCTOR_ALIASES

        self._drivers = {_fold(name): name for name in drivers}
        self._drivers.update({_fold(alias): name for alias, name in driver_aliases.items()})

        # Family name -> roster name, only when unambiguous
        family: dict[str, Optional[str]] = {}
        for name in drivers:
            key = _fold(name.replace(" Jr.", "").split()[-1])
            family[key] = None if key in family else name
        self._family = {k: v for k, v in family.items() if v is not None}

        self._constructors = {_fold(name): name for name in constructors}
        self._constructors.update({_fold(alias): name for alias, name in constructor_aliases.items()})

        self.unknown_drivers: set[str] = set()

    def resolve_driver(self, name: Optional[str], family_name: Optional[str] = None) -> Optional[str]:
        """Canonical roster name for a driver, or the given name if unknown."""
        if not name:
            return None

        found = self._drivers.get(_fold(name))
        if found:
            return found

        family_key = _fold(family_name) if family_name else _fold(name.split()[-1])
        found = self._family.get(family_key)
        if found:
            return found

        if name not in self.unknown_drivers:
            logger.warning("Driver %r not in roster, keeping API name", name)
            self.unknown_drivers.add(name)
        return name

    def resolve_constructor(self, name: Optional[str]) -> Optional[str]:
        if not name:
            return None
        found = self._constructors.get(_fold(name))
        if found:
            return found
        logger.warning("Constructor %r not in roster, keeping API name", name)
        return name

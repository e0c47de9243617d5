"""Per-commit city resolution keyed by canonical location name."""

import logging

from tripgen.db.repositories import CityRecord, TripStore
from tripgen.materialize.parsing import city_key

logger = logging.getLogger(__name__)


class CityResolver:
    """Resolve location labels to cities for the lifetime of one commit.

    Keys are derived with ``city_key``; each key is looked up (or created)
    once and then served from the map, so two activities at the same
    place resolve to the same City row.
    """

    def __init__(self, store: TripStore, destination: str) -> None:
        self._store = store
        self._destination = destination
        self._by_key: dict[str, CityRecord] = {}
        self.created = 0
        self.reused = 0

    async def resolve(self, location: str | None) -> CityRecord:
        """Return the city for a free-text location label."""
        key = city_key(location)
        city = self._by_key.get(key)
        if city is not None:
            return city

        city = await self._store.find_city(key)
        if city is None:
            city = await self._store.create_city(
                key, description=f"Location in {self._destination}"
            )
            self.created += 1
            logger.debug(f"Created city {key!r} for {self._destination}")
        else:
            self.reused += 1

        self._by_key[key] = city
        return city

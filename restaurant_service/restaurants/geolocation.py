from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod

from .config import DEFAULT_RESTAURANT_CONFIG, RestaurantConfig
from .models import Address, GeoLocation

logger = logging.getLogger(__name__)


class GeoLocator(ABC):
    """Turns a postal address into a coordinate."""

    @abstractmethod
    def locate(self, address: Address) -> GeoLocation:
        ...


class RandomLondonGeoLocator(GeoLocator):
    """Placeholder geocoder: a uniformly random point inside Greater London."""

    def __init__(
        self,
        config: RestaurantConfig = DEFAULT_RESTAURANT_CONFIG,
        rng: random.Random | None = None,
    ) -> None:
        self._config = config
        self._rng = rng or random.Random()

    def locate(self, address: Address) -> GeoLocation:
        c = self._config
        latitude = self._rng.uniform(c.london_min_latitude, c.london_max_latitude)
        longitude = self._rng.uniform(c.london_min_longitude, c.london_max_longitude)
        return GeoLocation(latitude=latitude, longitude=longitude)


class FixedGeoLocator(GeoLocator):
    """Deterministic geocoder returning the same coordinate for every address."""

    def __init__(self, latitude: float, longitude: float) -> None:
        self._location = GeoLocation(latitude=latitude, longitude=longitude)

    def locate(self, address: Address) -> GeoLocation:
        return self._location.model_copy()


_geolocator: GeoLocator | None = None


def build_geolocator(config: RestaurantConfig = DEFAULT_RESTAURANT_CONFIG) -> GeoLocator:
    if config.geolocator == "fixed":
        return FixedGeoLocator(config.fixed_latitude, config.fixed_longitude)
    if config.geolocator != "random_london":
        logger.warning("Unknown geolocator %r, using random_london", config.geolocator)
    return RandomLondonGeoLocator(config)


def get_geolocator() -> GeoLocator:
    """Return the process-wide geolocator, building it on first call."""
    global _geolocator
    if _geolocator is None:
        _geolocator = build_geolocator()
    return _geolocator

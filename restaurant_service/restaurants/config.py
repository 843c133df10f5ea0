from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class RestaurantConfig:
    """
    Configuration for the restaurant aggregate manager and its collaborators.
    """

    default_page_size: int = int(os.getenv("DEFAULT_PAGE_SIZE", "20"))
    geolocator: str = os.getenv("GEOLOCATOR", "random_london")

    # Used by the fixed geolocator
    fixed_latitude: float = float(os.getenv("FIXED_LATITUDE", "51.5072"))
    fixed_longitude: float = float(os.getenv("FIXED_LONGITUDE", "-0.1276"))

    # Greater London bounding box for the random geolocator
    london_min_latitude: float = 51.28
    london_max_latitude: float = 51.686
    london_min_longitude: float = -0.489
    london_max_longitude: float = 0.236


DEFAULT_RESTAURANT_CONFIG = RestaurantConfig()

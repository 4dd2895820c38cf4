"""
Settings Module - Centralized Configuration Management
=======================================================

ARCHITECTURAL DECISION:
- All configuration is loaded from environment variables (no hardcoded secrets)
- Settings are immutable dataclass for safety and clarity
- Single source of truth for all configurable values

EXTENSIBILITY:
- To move the review store: set CAFE_DETAILS_DB
- To rank different menu items: set MENU_KEYWORDS (comma-separated)
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from functools import lru_cache
from typing import Tuple

from dotenv import load_dotenv

from ...domain.keywords import DEFAULT_MENU_KEYWORDS

# Load .env file if present (development convenience)
load_dotenv()


def _split_terms(raw: str) -> Tuple[str, ...]:
    return tuple(term.strip().lower() for term in raw.split(",") if term.strip())


@dataclass(frozen=True)
class PlacesSettings:
    """Google Places API settings."""

    api_key: str = field(default_factory=lambda: os.getenv("GOOGLE_MAPS_API_KEY", ""))
    details_url: str = "https://maps.googleapis.com/maps/api/place/details/json"
    photo_url: str = "https://maps.googleapis.com/maps/api/place/photo"

    # Only what the details view needs
    details_fields: Tuple[str, ...] = ("reviews", "rating", "user_ratings_total")

    photo_max_width: int = 400
    timeout_seconds: int = 10


@dataclass(frozen=True)
class StoreSettings:
    """Review store settings."""

    database_file: Path = field(
        default_factory=lambda: Path(os.getenv("CAFE_DETAILS_DB", "cafe_details.db"))
    )


@dataclass(frozen=True)
class KeywordSettings:
    """Menu keyword vocabulary."""

    vocabulary: Tuple[str, ...] = field(
        default_factory=lambda: _split_terms(os.getenv("MENU_KEYWORDS", ""))
        or DEFAULT_MENU_KEYWORDS
    )


@dataclass(frozen=True)
class Settings:
    """
    Root settings container - Single source of truth for all configuration.

    Usage:
        from cafe_details.infrastructure.config import get_settings
        settings = get_settings()
        print(settings.places.api_key)
    """

    places: PlacesSettings = field(default_factory=PlacesSettings)
    store: StoreSettings = field(default_factory=StoreSettings)
    keywords: KeywordSettings = field(default_factory=KeywordSettings)

    def validate(self) -> list[str]:
        """
        Validate settings and return list of warnings/errors.
        Returns empty list if all settings are valid.
        """
        issues = []

        if not self.places.api_key:
            issues.append(
                "WARNING: GOOGLE_MAPS_API_KEY not set. "
                "Google reviews and cafe photos will be unavailable."
            )

        return issues


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get singleton Settings instance.
    Cached to ensure consistent settings throughout application lifecycle.
    """
    return Settings()

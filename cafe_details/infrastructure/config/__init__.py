from .settings import (
    KeywordSettings,
    PlacesSettings,
    Settings,
    StoreSettings,
    get_settings,
)

__all__ = ["KeywordSettings", "PlacesSettings", "Settings", "StoreSettings", "get_settings"]

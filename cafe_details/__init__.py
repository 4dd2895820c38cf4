# Cafe Details - Merged Cafe Review View
# ======================================
# Combines user-submitted reviews from a live review store with the
# reviews and rating of a third-party place-details API.
#
# ARCHITECTURE LAYERS:
# - Domain:         Pure review math (keyword tally, averages, filters)
# - Application:    Snapshot channels and the per-cafe details session
# - Infrastructure: External services (SQLite review store, Places API, config)
# - Web:            FastAPI JSON endpoints
#
# Infrastructure components are injected into the application layer,
# so the store or the API client can be swapped for a test double.

__version__ = "0.1.0"

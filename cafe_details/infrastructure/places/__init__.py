from .places_client import PlaceDetailsRequest, PlacePhotoRequest, PlacesClient

__all__ = ["PlaceDetailsRequest", "PlacePhotoRequest", "PlacesClient"]

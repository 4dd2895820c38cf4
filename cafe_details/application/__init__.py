# Application Layer
# =================
# Use cases built on the domain layer:
# - snapshot.py: latest-value channel per data source
# - cafe_details_service.py: live merged view of one cafe
# - ports.py: interfaces the infrastructure layer implements

from .ports import PlaceDetailsProvider, ReviewStore
from .snapshot import SnapshotChannel
from .cafe_details_service import CafeDetailsSession, CafeDetailsView, validate_review

__all__ = [
    "PlaceDetailsProvider",
    "ReviewStore",
    "SnapshotChannel",
    "CafeDetailsSession",
    "CafeDetailsView",
    "validate_review",
]

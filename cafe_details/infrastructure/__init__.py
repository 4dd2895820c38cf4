# Infrastructure Layer
# ====================
# Contains all external service integrations:
# - places/: Google Place Details API client
# - persistence/: SQLite review and user-profile store
# - config/: Environment and settings management
#
# This layer can be replaced entirely without affecting domain/application layers.

"""
Application Constants.
Stores default values for the editor window and command line.
"""

# Window Configuration
WINDOW_TITLE = "Geofence Editor"
DEFAULT_WINDOW_WIDTH = 1024
DEFAULT_WINDOW_HEIGHT = 720
WINDOW_SETTINGS_KEY = "GeofenceEditor"
WINDOW_SETTINGS_APP = "GeofenceEditor"

# Status Messages
STATUS_VIEW_MODE = "View mode"
STATUS_EDIT_MODE = "Edit mode: tap the map to add vertices"
STATUS_POINT_COUNT = "{count} vertices"

# Exit output
GEOJSON_INDENT = 2

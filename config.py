"""
Konfiguration och konstanter för löparruttplaneraren
"""

# Standardvärden
DEFAULT_PACE = "5:30"
DEFAULT_CENTER = [59.3293, 18.0686]  # Stockholm
DEFAULT_ROUTE_NAME = "Planned route"
DEFAULT_LOG_LEVEL = "INFO"

# API URLs
OSRM_BASE_URL = "https://router.project-osrm.org"
ORS_BASE_URL = "https://api.openrouteservice.org"
GRAPHHOPPER_BASE_URL = "https://graphhopper.com/api/1"
ELEVATION_BASE_URL = "https://api.open-elevation.com/api/v1"
ROUTE_API_BASE_URL = "https://running-route-planner.vercel.app"

# HTTP
REQUEST_TIMEOUT = 30  # sekunder
ELEVATION_TIMEOUT = 15

# Routing-inställningar
OSRM_PROFILE = "driving"  # Den publika OSRM-servern har bara bilprofilen
BASELINE_PROVIDER = "osrm"
PREMIUM_PROVIDERS = ("ors", "graphhopper")
DEFAULT_PROFILE = "foot"

# Profilnamn per premium-provider
ORS_PROFILES = {
    "foot": "foot-walking",
    "bike": "cycling-regular",
}
GRAPHHOPPER_PROFILES = {
    "foot": "foot",
    "bike": "bike",
}

# HTTP-statusar som inte löses genom att försöka igen med samma nyckel
AUTH_ERROR_STATUSES = (401, 403)
RATE_LIMIT_STATUSES = (429,)

# Namn på nycklar i st.secrets
SECRET_NAMES = {
    "ors": "ORS_API_KEY",
    "graphhopper": "GRAPHHOPPER_API_KEY",
}

# Höjddata
ELEVATION_MAX_POINTS = 100

# Kilometermarkeringar
KM_MARKER_SPACING = 1000.0  # meter

# Jordens radie i meter (samma som Leaflet)
EARTH_RADIUS_M = 6371000

"""Shared application constants.

Centralizes repeat values used across import/statistics logic so we can
document and adjust them in one place.
"""

# Meters -> statute miles
METERS_TO_MILES = 0.000621371

# Kilometers -> statute miles
KM_TO_MILES = 0.621371

# Mean Earth radius used by the haversine formula
EARTH_RADIUS_KM = 6371.0

# A single-run CSV distance above this (in miles) is assumed to be kilometers
MAX_PLAUSIBLE_RUN_MI = 50.0

# Runs shorter than this are ignored when looking for the fastest pace
MIN_PACE_DISTANCE_MI = 1.0

# Feeling rating assigned to imported runs (1-5 scale)
DEFAULT_FEELING_RATING = 3

# Extensions we recognise but refuse to parse (binary watch formats)
UNSUPPORTED_BINARY_EXTENSIONS = (".fit", ".fit.gz", ".fits")

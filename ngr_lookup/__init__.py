"""ngr_lookup: UK postcode to National Grid Reference and WGS84 lat/lon."""

__version__ = "1.0.0"

"""Exception hierarchy for postcode lookup and grid reference conversion."""


class NGRLookupError(Exception):
    """Base exception for all ngr_lookup errors."""


class LookupFailure(NGRLookupError):
    """A postcode could not be resolved to a lookup result."""

    message = "Lookup failed"


class EmptyPostcode(LookupFailure):
    """The query was blank after trimming; nothing was sent."""

    message = "Enter a postcode"

    def __init__(self, query: str = ""):
        self.query = query
        super().__init__(self.message)


class PostcodeNotFound(LookupFailure):
    """The lookup service answered, but knows no such postcode."""

    message = "Postcode not found"

    def __init__(self, postcode: str, service_status=None):
        self.postcode = postcode
        self.service_status = service_status
        super().__init__(f"Postcode not found: '{postcode}'")


class ConnectionFailed(LookupFailure):
    """The lookup service could not be reached or sent an unreadable reply."""

    message = "Connection error"

    def __init__(self, postcode: str, reason: str = ""):
        self.postcode = postcode
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Could not reach the postcode service for '{postcode}'{detail}")


class Offline(ConnectionFailed):
    """Transport failure while the host is known to have no connectivity."""

    message = "You appear to be offline. Previously looked-up postcodes may still be available."


class ConversionError(NGRLookupError):
    """An easting/northing pair could not be turned into a grid reference or lat/lon."""

    def __init__(self, easting, northing, reason: str = ""):
        self.easting = easting
        self.northing = northing
        self.reason = reason
        super().__init__(f"Cannot convert easting={easting!r}, northing={northing!r}: {reason}")

"""Exception hierarchy shared by the repositories, services and API layer.

Only ``InvalidInputError`` and ``RouteUnavailableError`` are meant to reach
callers of the planner. Lookup failures are absorbed by the speed resolver.
"""


class WaystopError(Exception):
    """Base class for all Waystop errors."""
    pass


class PlanningError(WaystopError):
    """A stop plan could not be produced."""
    pass


class InvalidInputError(PlanningError, ValueError):
    """Fewer than two locations, or a coordinate that does not parse."""
    pass


class RouteUnavailableError(PlanningError):
    """The route provider returned no usable geometry."""
    pass


class LookupDegradedError(WaystopError, LookupError):
    """A jurisdiction or speed-limit lookup failed."""
    pass


class ReverseGeocodingError(LookupDegradedError):
    """Error during reverse geocoding."""
    pass


class SpeedLimitTableError(WaystopError):
    """The speed limit table could not be loaded."""
    pass


class ExportError(WaystopError):
    """The stop spreadsheet could not be written."""
    pass

from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict, Field

from waystop.models.location import Point

HIGHWAY_STOP_DURATION = "1:00"
HIGHWAY_STOP_LOCATION = "Highway Stop"
USER_STOP_DURATION = "User Stop"
USER_STOP_LOCATION = "User Provided Stop"
FUEL_AVAILABLE = "Available"
FUEL_NOT_AVAILABLE = "Not Available"


def format_coordinate(value: float) -> str:
    """Two-decimal string, rounding exact ties away from zero.

    The float is quantized at its exact binary value, so 41.125 becomes
    "41.13" while 1.005 (stored just below the tie) stays "1.00".
    """
    # Negative zero prints without a sign
    if value == 0:
        value = 0.0
    return f"{Decimal(value).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP):f}"


class Stop(BaseModel):
    model_config = ConfigDict(frozen=True)

    duration: str = Field(..., description="'1:00' for highway stops, 'User Stop' for user stops")
    lat: str = Field(..., description="Latitude with two decimals")
    lon: str = Field(..., description="Longitude with two decimals")
    location: str
    fuel: str = Field(..., description="Fuel availability label")

    @classmethod
    def highway(cls, point: Point) -> "Stop":
        return cls(
            duration=HIGHWAY_STOP_DURATION,
            lat=format_coordinate(point.latitude),
            lon=format_coordinate(point.longitude),
            location=HIGHWAY_STOP_LOCATION,
            fuel=FUEL_NOT_AVAILABLE,
        )

    @classmethod
    def user(cls, point: Point) -> "Stop":
        return cls(
            duration=USER_STOP_DURATION,
            lat=format_coordinate(point.latitude),
            lon=format_coordinate(point.longitude),
            location=USER_STOP_LOCATION,
            fuel=FUEL_AVAILABLE,
        )

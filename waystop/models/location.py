from pydantic import BaseModel, ConfigDict, Field


class Point(BaseModel):
    """A WGS84 coordinate pair in degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    @classmethod
    def from_lon_lat(cls, lon: float, lat: float) -> "Point":
        """Build a point from a GeoJSON/OSRM ``[lon, lat]`` pair."""
        return cls(latitude=lat, longitude=lon)

    def as_lon_lat(self) -> str:
        return f"{self.longitude},{self.latitude}"

from typing import List
from pydantic import BaseModel, Field
from waystop.models.location import Point


class RouteGeometry(BaseModel):
    points: List[Point] = Field(..., description="Path points in travel order (lat, lon)")
    distance_meters: float = Field(0.0, description="Total distance reported by the provider")
    duration_seconds: float = Field(0.0, description="Total duration reported by the provider")

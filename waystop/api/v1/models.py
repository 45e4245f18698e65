from typing import List, Optional
from pydantic import BaseModel, Field

from waystop.models.stops import Stop


# Request Models
class PlanRequest(BaseModel):
    locations: List[str] = Field(
        ..., description="Ordered route locations as 'latitude,longitude' strings"
    )
    user_waypoints: Optional[List[str]] = Field(
        None,
        description="Mandatory stops as 'latitude,longitude' strings in travel order. "
        "Defaults to the route locations themselves.",
    )


# Response Models
class PlanResponse(BaseModel):
    stops: List[Stop]
    count: int


class ErrorResponse(BaseModel):
    detail: str

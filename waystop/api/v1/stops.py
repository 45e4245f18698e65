from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import FileResponse
from starlette.background import BackgroundTask
from starlette.concurrency import run_in_threadpool

from waystop.api.dependencies import get_planner_service
from waystop.api.v1.models import ErrorResponse, PlanRequest, PlanResponse
from waystop.core.exceptions import ExportError, InvalidInputError, RouteUnavailableError
from waystop.core.settings import Settings, get_settings
from waystop.services.export import XLSX_MEDIA_TYPE, remove_export, write_stops_workbook
from waystop.services.planner import PlannerService, split_coordinate_query

logger = logging.getLogger(__name__)
router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


@router.post("/plan", response_model=PlanResponse, responses=ERROR_RESPONSES)
async def plan_stops_api(
    request: PlanRequest,
    planner: PlannerService = Depends(get_planner_service),
):
    """Plan highway and user stops for a route and return them as JSON."""
    try:
        stops = await planner.plan_stops(request.locations, request.user_waypoints)
    except InvalidInputError as e:
        logger.warning(f"Rejected plan request: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except RouteUnavailableError as e:
        logger.error(f"Route unavailable for {request.locations}: {e}")
        raise HTTPException(status_code=503, detail=f"Route service error: {e}")

    return PlanResponse(stops=stops, count=len(stops))


@router.get("/export", responses=ERROR_RESPONSES, response_class=FileResponse)
async def export_stops_api(
    coordinates: Optional[str] = Query(
        None, description="Route locations as 'lat,lon' pairs separated by ';' or '|'"
    ),
    planner: PlannerService = Depends(get_planner_service),
    settings: Settings = Depends(get_settings),
):
    """Plan stops and download them as an Excel workbook."""
    if not coordinates:
        raise HTTPException(status_code=400, detail="Please provide coordinates.")

    locations = split_coordinate_query(coordinates)
    if len(locations) < 2:
        raise HTTPException(status_code=400, detail="Need at least two locations.")

    try:
        stops = await planner.plan_stops(locations)
        output_file = await run_in_threadpool(write_stops_workbook, stops, settings.EXPORT_DIR)
    except InvalidInputError as e:
        logger.warning(f"Rejected export request: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except RouteUnavailableError as e:
        logger.error(f"Error planning route: {e}")
        raise HTTPException(status_code=503, detail=f"Route service error: {e}")
    except ExportError as e:
        logger.error(f"Error exporting stops: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="An error occurred while exporting the stops.")

    return FileResponse(
        output_file,
        media_type=XLSX_MEDIA_TYPE,
        filename=output_file.name,
        background=BackgroundTask(remove_export, output_file),
    )

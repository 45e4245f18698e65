from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
import os
from dotenv import load_dotenv
import logging
import time
import uvicorn
from fastapi.exceptions import HTTPException

# Load environment variables from .env file
load_dotenv()

from waystop.core.logging import setup_logging
from waystop.core.settings import get_settings

settings = get_settings()

# Setup logging
setup_logging(level=settings.LOG_LEVEL, log_file=settings.LOG_FILE or None)
logger = logging.getLogger(__name__)

from waystop.api.v1 import stops

app = FastAPI(title="Waystop API", version="0.1.0")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


PLANNING_FAILED_DETAIL = "Stop planning failed unexpectedly. See server logs for details."


@app.middleware("http")
async def log_requests_middleware(request: Request, call_next):
    """Log each request with its status and timing; turn stray exceptions into a 500."""
    started = time.perf_counter()
    route = f"{request.method} {request.url.path}"
    if request.url.query:
        logger.info(f"{route} ?{request.url.query}")

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(
            f"{route} failed after {time.perf_counter() - started:.3f}s: {type(e).__name__}: {e}",
            exc_info=True,
        )
        return JSONResponse(status_code=500, content={"detail": PLANNING_FAILED_DETAIL})

    logger.info(f"{route} -> {response.status_code} in {time.perf_counter() - started:.3f}s")
    return response


STATIC_DIR = os.path.join(os.path.dirname(__file__), "static")
if os.path.isdir(STATIC_DIR):
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
else:
    logger.warning(f"Static directory '{STATIC_DIR}' not found. Static files will not be served.")

# Include routers
app.include_router(stops.router, prefix="/api/v1/stops", tags=["stops"])
# Path used by the bundled page and by existing spreadsheet links
app.add_api_route(
    "/plan-route",
    stops.export_stops_api,
    methods=["GET"],
    tags=["stops"],
    response_class=FileResponse,
    summary="Plan stops and download them as a spreadsheet",
)


@app.get("/", include_in_schema=False)
async def index_page():
    """The coordinate form that downloads a stops spreadsheet."""
    index_html = os.path.join(STATIC_DIR, "index.html")
    if not os.path.isfile(index_html):
        logger.error(f"Planner page missing at {index_html}")
        return JSONResponse(status_code=404, content={"detail": "Planner page not found."})
    return FileResponse(index_html)


@app.get("/api/v1", summary="API Welcome", tags=["General"])
async def api_welcome_message():
    return {
        "message": "Waystop API v1: plan highway and user stops along a driving route",
        "version": app.version,
        "endpoints": {
            "plan": "/api/v1/stops/plan",
            "export": "/api/v1/stops/export",
        },
        "documentation_url": app.docs_url,
    }


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    if exc.status_code >= 500:
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def run():
    """Console entry point: serve the API with uvicorn."""
    app_settings = get_settings()
    logger.info(f"Starting server on {app_settings.HOST}:{app_settings.PORT}, environment: {app_settings.ENVIRONMENT}")
    uvicorn.run(
        "waystop.main:app",
        host=app_settings.HOST,
        port=app_settings.PORT,
        log_level=app_settings.LOG_LEVEL.lower(),
        reload=app_settings.ENVIRONMENT == "development",
    )


if __name__ == "__main__":
    run()

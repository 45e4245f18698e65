from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union
import logging

from openpyxl import Workbook

from waystop.core.exceptions import ExportError
from waystop.models.stops import Stop

logger = logging.getLogger(__name__)

SHEET_TITLE = "Route Stops"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# (header, Stop field, column width)
COLUMNS: List[Tuple[str, str, int]] = [
    ("Duration (HH:MM)", "duration", 15),
    ("Latitude", "lat", 15),
    ("Longitude", "lon", 15),
    ("Location", "location", 20),
    ("Fuel Available", "fuel", 15),
]


def export_filename(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"route_stops_{now.strftime('%Y%m%d%H%M%S%f')}.xlsx"


def build_workbook(stops: Sequence[Stop]) -> Workbook:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = SHEET_TITLE

    sheet.append([header for header, _, _ in COLUMNS])
    for index, (_, _, width) in enumerate(COLUMNS):
        sheet.column_dimensions[chr(ord("A") + index)].width = width

    for stop in stops:
        sheet.append([getattr(stop, field) for _, field, _ in COLUMNS])
    return workbook


def write_stops_workbook(stops: Sequence[Stop], directory: Union[str, Path]) -> Path:
    """Write ``stops`` to a new timestamped .xlsx file in ``directory``."""
    directory = Path(directory)
    output_file = directory / export_filename()
    try:
        directory.mkdir(parents=True, exist_ok=True)
        build_workbook(stops).save(output_file)
    except OSError as e:
        logger.error(f"Failed to write stop export {output_file}: {e}")
        raise ExportError(f"Could not write stop export: {e}") from e

    logger.info(f"Wrote {len(stops)} stops to {output_file}")
    return output_file


def remove_export(path: Union[str, Path]) -> None:
    """Delete an export once it has been streamed. Failures are only logged."""
    try:
        Path(path).unlink()
    except FileNotFoundError:
        logger.warning(f"Export {path} was already removed")
    except OSError as e:
        logger.error(f"Error deleting export {path}: {e}")

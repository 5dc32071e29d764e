from typing import Iterable, List, Dict, Any
import json
import logging

from .uptime import StationUptime

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("text", "json")


def render_text(uptimes: Iterable[StationUptime]) -> str:
    """Return one ``"<station> <uptime>"`` line per station."""
    return "".join(f"{station_id} {pct}\n" for station_id, pct in uptimes)


def render_json(uptimes: Iterable[StationUptime]) -> str:
    rows: List[Dict[str, Any]] = [
        {"station_id": station_id, "uptime": pct} for station_id, pct in uptimes
    ]
    return json.dumps(rows, indent=2) + "\n"


def render(uptimes: Iterable[StationUptime], output_format: str = "text") -> str:
    """Render sorted station uptimes in the requested format."""
    if output_format == "text":
        return render_text(uptimes)
    if output_format == "json":
        return render_json(uptimes)
    raise ValueError(f"Unsupported output format: {output_format}")

"""
Shape filtered flight records into the XML response document.

Projection keeps air_time, distance and (on request) date. The result is
capped at MAX_RECORDS and rendered as indented XML:

    <flights>
      <flight>
        <air_time>100</air_time>
        <distance>200</distance>
      </flight>
    </flights>
"""

import logging
import math
import re
from typing import Any, Dict, List, Mapping
from xml.etree import ElementTree

from models.flights import FlightQueryResult, ProjectedFlight
from services.errors import RenderError
from services.flight_filter import get_query_param

logger = logging.getLogger(__name__)

# ── Constants ────────────────────────────────────────────────────────────────

MAX_RECORDS = 1000
ROOT_TAG = "flights"
ITEM_TAG = "flight"
INDENT = "  "

_TAG_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_.\-]*$")
_ILLEGAL_XML_CHARS_RE = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


# ── Projection & capping ─────────────────────────────────────────────────────

def include_date(query_params: Mapping[str, Any]) -> bool:
    """Dates are included only for the exact value ``date=true``."""
    return get_query_param(query_params, "date") == "true"


def project_flight(flight: Dict[str, Any], with_date: bool = False) -> ProjectedFlight:
    """Map a raw flight record to its output fields, copying values as-is."""
    fields = {
        "air_time": flight.get("AIR_TIME"),
        "distance": flight.get("DISTANCE"),
    }
    if with_date:
        fields["date"] = flight.get("FL_DATE")
    return ProjectedFlight(**fields)


def cap_flights(flights: List[Any], limit: int = MAX_RECORDS) -> List[Any]:
    """First ``limit`` entries, in order."""
    return flights[:limit]


# ── Rendering ────────────────────────────────────────────────────────────────

def _format_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise RenderError(f"Cannot render non-finite number {value!r}")
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    if isinstance(value, str):
        if _ILLEGAL_XML_CHARS_RE.search(value):
            raise RenderError(f"Value {value!r} contains characters not allowed in XML")
        return value
    raise RenderError(f"Cannot render value of type {type(value).__name__}")


def _append_value(parent: ElementTree.Element, tag: str, value: Any) -> None:
    """Append ``value`` under ``parent`` as one or more ``tag`` elements."""
    if value is None or value == "" or value == {}:
        return

    if not _TAG_RE.match(tag):
        raise RenderError(f"Invalid XML element name: {tag!r}")

    if isinstance(value, (list, tuple)):
        for item in value:
            _append_value(parent, tag, item)
        return

    element = ElementTree.SubElement(parent, tag)
    if isinstance(value, dict):
        for key, child in value.items():
            _append_value(element, str(key), child)
        # Objects whose members were all omitted leave no placeholder
        if len(element) == 0:
            parent.remove(element)
    else:
        element.text = _format_scalar(value)


def render_flights_xml(flights: List[ProjectedFlight]) -> str:
    """Render projected flights as an indented XML document."""
    root = ElementTree.Element(ROOT_TAG)
    for flight in flights:
        item = ElementTree.SubElement(root, ITEM_TAG)
        for tag, value in flight.present_fields().items():
            _append_value(item, tag, value)

    ElementTree.indent(root, space=INDENT)
    return ElementTree.tostring(root, encoding="unicode")


def shape_flights(
    flights: List[Dict[str, Any]],
    query_params: Mapping[str, Any],
    limit: int = MAX_RECORDS,
) -> FlightQueryResult:
    """Cap, project and render filtered flights, keeping both counters.

    Only the capped prefix is projected; ``total`` counts every match.
    """
    limited = cap_flights(flights, limit)
    try:
        with_date = include_date(query_params)
        projected = [project_flight(flight, with_date) for flight in limited]
        xml = render_flights_xml(projected)
    except RenderError:
        raise
    except (AttributeError, TypeError, ValueError) as e:
        logger.error(f"Error rendering flights: {e}")
        raise RenderError(str(e)) from e

    return FlightQueryResult(xml=xml, total=len(flights), returned=len(projected))

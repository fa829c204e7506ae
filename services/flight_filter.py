"""
Query-parameter driven filtering of flight records.

Only one filter exists: ``airtime_min``. Invalid thresholds are ignored
rather than rejected, so filtering never fails.
"""

import re
from typing import Any, Dict, List, Mapping, Optional

AIRTIME_MIN_PARAM = "airtime_min"

_INTEGER_RE = re.compile(r"^\s*[+-]?\d+\s*$")
_NUMBER_RE = re.compile(r"^\s*[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?\s*$")


def get_query_param(query_params: Mapping[str, Any], name: str) -> Optional[str]:
    """Return the first value of a query parameter, or None if absent.

    Accepts Starlette ``QueryParams`` (multi-valued) as well as plain dicts.
    """
    if hasattr(query_params, "getlist"):
        values = query_params.getlist(name)
        return values[0] if values else None

    value = query_params.get(name)
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def parse_airtime_min(value: Optional[str]) -> Optional[int]:
    """Parse the ``airtime_min`` threshold; None means the filter is off."""
    if value is None or not isinstance(value, str):
        return None
    if not _INTEGER_RE.match(value):
        return None
    return int(value)


def _as_number(value: Any) -> Optional[float]:
    """Numeric view of an AIR_TIME value, or None if it has none."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    # Plain decimal strings only; no "inf", "nan" or "1_000"
    if isinstance(value, str) and _NUMBER_RE.match(value):
        return float(value)
    return None


def _air_time_above(flight: Dict[str, Any], threshold: int) -> bool:
    air_time = _as_number(flight.get("AIR_TIME"))
    return air_time is not None and air_time > threshold


def filter_flights(
    flights: List[Dict[str, Any]],
    query_params: Mapping[str, Any],
) -> List[Dict[str, Any]]:
    """Return the flights matching every active filter, in file order.

    The input list is never modified; a new list is always returned.
    """
    threshold = parse_airtime_min(get_query_param(query_params, AIRTIME_MIN_PARAM))
    if threshold is None:
        return list(flights)

    return [flight for flight in flights if _air_time_above(flight, threshold)]

"""
Read the flight observations dataset from a newline-delimited JSON file.

Each non-empty line holds one JSON object (one flight). The file is read
from scratch on every call; nothing is cached between requests.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from services.errors import DatasetParseError, DatasetReadError

logger = logging.getLogger(__name__)


def _reject_constant(name: str):
    """Refuse NaN / Infinity, which are not valid JSON."""
    raise ValueError(f"invalid JSON constant {name}")


def _read_text_sync(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def parse_flight_lines(text: str) -> List[Dict[str, Any]]:
    """Parse NDJSON text into a list of flight records, in line order.

    Blank lines are skipped. Any malformed line fails the whole parse.
    """
    flights: List[Dict[str, Any]] = []

    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue

        try:
            record = json.loads(line, parse_constant=_reject_constant)
        except (ValueError, RecursionError) as e:
            raise DatasetParseError(
                f"Invalid JSON on line {line_number}: {e}",
                line_number=line_number,
            ) from e

        if not isinstance(record, dict):
            raise DatasetParseError(
                f"Line {line_number} is not a JSON object "
                f"(got {type(record).__name__})",
                line_number=line_number,
            )

        flights.append(record)

    return flights


async def load_flights(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """Load every flight record from ``path``.

    Raises DatasetReadError when the file cannot be read and
    DatasetParseError when any line is not a JSON object.
    """
    path = Path(path)

    # Blocking file read runs in a worker thread
    try:
        text = await asyncio.to_thread(_read_text_sync, path)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error reading flights file {path}: {e}")
        raise DatasetReadError(str(e)) from e

    flights = parse_flight_lines(text)
    logger.debug(f"Loaded {len(flights)} flights from {path}")
    return flights

"""
Flight query service.

Runs the read pipeline for one request: load the dataset file, filter by
the query parameters, then project, cap and render the XML document.
"""

import logging
from pathlib import Path
from typing import Any, Mapping, Union

from data_ingestion.flights_file import load_flights
from models.flights import FlightQueryResult
from services.errors import FlightDataError
from services.flight_filter import filter_flights
from services.xml_response import MAX_RECORDS, shape_flights

logger = logging.getLogger(__name__)


class FlightQueryService:
    """Serve filtered flight records from a newline-delimited JSON file."""

    def __init__(self, max_records: int = MAX_RECORDS):
        self.max_records = max_records

    async def query(
        self,
        path: Union[str, Path],
        query_params: Mapping[str, Any],
    ) -> FlightQueryResult:
        """Load, filter and shape flights for a single request.

        Failures are raised to the caller unchanged; nothing is retried.
        """
        try:
            flights = await load_flights(path)
            matched = filter_flights(flights, query_params)
            result = shape_flights(matched, query_params, limit=self.max_records)
        except FlightDataError as e:
            logger.error(f"Flight query failed ({type(e).__name__}): {e}")
            raise

        logger.debug(
            f"Flight query: loaded={len(flights)} total={result.total} returned={result.returned}"
        )
        return result


# Global flight query service instance
flight_query_service = FlightQueryService()

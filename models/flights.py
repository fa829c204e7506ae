from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ProjectedFlight(BaseModel):
    """Output shape of one flight record; None means the field is omitted."""

    air_time: Optional[Any] = Field(None, description="Air time in minutes (AIR_TIME)")
    distance: Optional[Any] = Field(None, description="Flight distance (DISTANCE)")
    date: Optional[Any] = Field(None, description="Flight date (FL_DATE), only when date=true")

    def present_fields(self) -> Dict[str, Any]:
        """Fields to render, in output order, skipping absent ones."""
        values = {name: getattr(self, name) for name in type(self).model_fields}
        return {name: value for name, value in values.items() if value is not None}


class FlightQueryResult(BaseModel):
    """Rendered XML document plus the record counters for response headers."""

    xml: str = Field(..., description="XML document with the returned flights")
    total: int = Field(..., description="Number of flights matching the filters")
    returned: int = Field(..., description="Number of flights in the document (after the cap)")

    def headers(self) -> Dict[str, str]:
        return {
            "X-Total-Records": str(self.total),
            "X-Returned-Records": str(self.returned),
        }

"""
Flights router.

Serves the configured flight dataset as XML, optionally filtered by minimum
air time and with flight dates included on request.
"""

from fastapi import APIRouter, HTTPException, Request, Response, status

from services.errors import DatasetReadError, FlightDataError
from services.flight_query_service import flight_query_service

XML_MEDIA_TYPE = "application/xml; charset=utf-8"

router = APIRouter(tags=["Flights"])


@router.get(
    "/",
    summary="Get flight records as XML",
    description=(
        "Returns the flight dataset as an XML document. At most 1000 records "
        "are returned; the `X-Total-Records` header holds the number of "
        "matching records and `X-Returned-Records` the number returned.\n\n"
        "**Query parameters:**\n"
        "- `airtime_min=X` — only flights with air time strictly greater than X minutes "
        "(ignored when X is not an integer)\n"
        "- `date=true` — include the flight date\n\n"
        "**Example:** `/?date=true&airtime_min=340`"
    ),
    response_class=Response,
    responses={
        200: {
            "content": {
                "application/xml": {
                    "example": (
                        "<flights>\n"
                        "  <flight>\n"
                        "    <air_time>352</air_time>\n"
                        "    <distance>2475</distance>\n"
                        "    <date>2022-01-01</date>\n"
                        "  </flight>\n"
                        "</flights>"
                    )
                }
            }
        },
        500: {"description": "Dataset file unreadable or malformed"},
    },
)
async def get_flights(request: Request):
    """Get filtered flight records as XML."""
    input_path = request.app.state.input_path

    try:
        result = await flight_query_service.query(input_path, request.query_params)
    except DatasetReadError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to read data file: {e}",
        )
    except FlightDataError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to process data: {e}",
        )

    headers = result.headers()
    return Response(content=result.xml, media_type=XML_MEDIA_TYPE, headers=headers)


@router.options("/", include_in_schema=False)
async def flights_options():
    """Answer OPTIONS requests; the CORS headers come from the middleware."""
    return Response(status_code=status.HTTP_204_NO_CONTENT)

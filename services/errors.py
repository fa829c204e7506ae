"""
Errors raised by the flight query pipeline.

The HTTP layer maps every one of these to a 500 response: a broken or
unreadable dataset is a server fault, never a client mistake.
"""

from typing import Optional


class FlightDataError(Exception):
    """Base class for failures while serving flight records."""


class DatasetReadError(FlightDataError):
    """The dataset file could not be read."""


class DatasetParseError(FlightDataError):
    """A line of the dataset file is not a valid JSON object."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        super().__init__(message)
        self.line_number = line_number


class RenderError(FlightDataError):
    """Projected flights could not be rendered into the XML document."""

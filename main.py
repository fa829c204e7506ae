import argparse
import os
import sys
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Dict, List, Optional

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from dotenv import load_dotenv

from routers.flights import router as flights_router

# Load environment variables
load_dotenv()

# Configuration
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO").upper()
VERSION = "1.0.0"

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("flights_api")


# ── Request logging middleware ───────────────────────────────────────────────

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method and URL of every incoming request"""

    async def dispatch(self, request: Request, call_next):
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        logger.info(f"{request.method} {target}")
        return await call_next(request)


# ── CORS middleware ──────────────────────────────────────────────────────────

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """Set the CORS headers on every response, errors and preflights included"""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response


def _add_cors(application: FastAPI):
    """Add CORS middleware to an app."""
    application.add_middleware(CORSHeadersMiddleware)


def _add_request_logging(application: FastAPI):
    application.add_middleware(RequestLoggingMiddleware)


# ── Application ──────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(main_app: FastAPI):
    """Application lifespan events"""
    logger.info(f"Flights API serving {main_app.state.input_path}")
    logger.info("Available query parameters:")
    logger.info("  ?date=true - include the flight date")
    logger.info("  ?airtime_min=X - only flights with air time above X minutes")
    logger.info("  Example: /?date=true&airtime_min=340")

    yield

    logger.info("Flights API shutting down...")


def create_app(input_path) -> FastAPI:
    """Build the API serving flights from the NDJSON file at ``input_path``."""
    application = FastAPI(
        title="Flights API",
        description=(
            "## Flights API\n\n"
            "Flight observations from a newline-delimited JSON dataset, served as XML.\n\n"
            "- **Air time filter** — `?airtime_min=X` keeps flights above X minutes\n"
            "- **Dates** — `?date=true` adds the flight date to every record\n"
            "- **Cap** — at most 1000 records per response, counts in `X-Total-Records` "
            "and `X-Returned-Records`\n"
        ),
        version=VERSION,
        lifespan=lifespan,
        debug=DEBUG,
    )
    application.state.input_path = Path(input_path)

    _add_cors(application)
    _add_request_logging(application)

    application.include_router(flights_router)

    @application.get("/health")
    async def health_check() -> Dict[str, str]:
        """Simple health check endpoint"""
        return {"status": "healthy", "version": VERSION}

    return application


# ── Command line ─────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    # -h is the host flag, so help is only available as --help
    parser = argparse.ArgumentParser(
        description='Serve a newline-delimited JSON flights dataset as XML over HTTP',
        add_help=False,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py -i flights-1m.json -h 127.0.0.1 -p 3000
  curl "http://127.0.0.1:3000/?date=true&airtime_min=340"
        """,
    )
    parser.add_argument('--help', action='help',
                        help='Show this help message and exit')
    parser.add_argument('-i', '--input', required=True,
                        help='Path to the NDJSON flights file')
    parser.add_argument('-h', '--host', required=True,
                        help='Server host address')
    parser.add_argument('-p', '--port', required=True, type=int,
                        help='Server port')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if not Path(args.input).exists():
        print('Cannot find input file', file=sys.stderr)
        return 1

    import uvicorn
    uvicorn.run(
        create_app(args.input),
        host=args.host,
        port=args.port,
        access_log=DEBUG,
        log_level=LOG_LEVEL.lower(),
    )
    return 0


# Application entry point
if __name__ == "__main__":
    sys.exit(main())

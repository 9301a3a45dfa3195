import logging
import os
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from stampgen.config import Settings, load_settings
from stampgen.errors import ResolutionError
from stampgen.formatter import format_timestamp
from stampgen.llm_client import client_from_settings
from stampgen.resolver import DateResolver

settings = load_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


class TimestampRequest(BaseModel):
    input: Optional[str] = None
    timeZone: Optional[str] = None


class FormatRequest(BaseModel):
    timestamp: int
    timeZone: Optional[str] = None


def create_app(settings: Settings, resolver: Optional[DateResolver] = None) -> FastAPI:
    """Builds the API. Tests pass their own resolver to avoid calling the model."""
    app = FastAPI(title="UNIX Timestamp Generator")
    app.state.settings = settings
    app.state.resolver = resolver or DateResolver(fallback=client_from_settings(settings))

    @app.exception_handler(ResolutionError)
    async def resolution_error_handler(request: Request, exc: ResolutionError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Rejected request body for {request.url.path}: {exc.errors()}")
        message = "Timestamp is required" if request.url.path.endswith("FormatTimestamp") else "Input is required"
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception(f"Error in API route {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "An error occurred while processing your request"},
        )

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.post("/api/GenerateUnixTimestamp")
    async def generate_unix_timestamp(payload: TimestampRequest):
        """Resolves a natural-language date/time to a UNIX timestamp."""
        time_zone = payload.timeZone or app.state.settings.default_timezone
        logger.info(f"Received input: {payload.input!r} ({time_zone})")
        timestamp = await app.state.resolver.resolve(payload.input, time_zone)
        logger.info(f"Generated UNIX timestamp: {timestamp}")
        return {"timestamp": timestamp}

    @app.post("/api/FormatTimestamp")
    async def format_unix_timestamp(payload: FormatRequest):
        """Renders a timestamp in every chat timestamp style."""
        time_zone = payload.timeZone or app.state.settings.default_timezone
        rows = format_timestamp(payload.timestamp, time_zone)
        return {
            "timestamp": payload.timestamp,
            "timeZone": time_zone,
            "rows": [row.as_dict() for row in rows],
        }

    return app


app = create_app(settings)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("server:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")), reload=True)

"""HTTP REST server for regex-forge."""

import logging
import time
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from pydantic import BaseModel, Field
from starlette.responses import Response

from regexforge import __version__
from regexforge.catalog import PatternCatalog, load_catalog
from regexforge.engine import Engine
from regexforge.exceptions import RegexForgeError
from regexforge.generator import StringGenerator
from regexforge.matching import UNBOUNDED, parse_options

logger = logging.getLogger(__name__)

# Prometheus metrics
REQUEST_COUNT = Counter(
    "regexforge_requests_total",
    "Total requests",
    ["endpoint", "status"],
)
REQUEST_DURATION = Histogram(
    "regexforge_request_duration_seconds",
    "Request duration in seconds",
    ["endpoint"],
)
CATEGORY_HITS = Counter(
    "regexforge_category_hits_total",
    "Total catalog categories found by scans",
    ["category"],
)


# Request/Response models
class ValidateRequest(BaseModel):
    """Request model for /validate endpoint."""

    pattern: str
    flags: list[str] = Field(default_factory=list)


class ExtractRequest(BaseModel):
    """Request model for /extract endpoint."""

    pattern: str
    text: str
    flags: list[str] = Field(default_factory=list)
    limit: int = UNBOUNDED


class ScanRequest(BaseModel):
    """Request model for /scan endpoint."""

    text: str
    entries: Optional[list[str]] = None


class GenerateRequest(BaseModel):
    """Request model for /generate endpoint."""

    pattern: str
    max_length: Optional[int] = None
    count: int = Field(default=1, ge=1, le=100)


class RangeRequest(BaseModel):
    """Request model for /range endpoint."""

    bound: int
    comparison: str = "lesser_or_equal"
    sql: bool = False


class ValidateResponse(BaseModel):
    """Response model for /validate endpoint."""

    ok: bool
    pattern: str


class ExtractResponse(BaseModel):
    """Response model for /extract endpoint."""

    matches: list[list[Optional[str]]]
    count: int


class ScanResponse(BaseModel):
    """Response model for /scan endpoint."""

    hits: dict[str, list[str]]
    count: int
    entries_searched: list[str]


class GenerateResponse(BaseModel):
    """Response model for /generate endpoint."""

    pattern: str
    values: list[str]


class RangeResponse(BaseModel):
    """Response model for /range endpoint."""

    bound: int
    comparison: str
    alternatives: list[str]


class HealthResponse(BaseModel):
    """Response model for /health endpoint."""

    status: str
    version: str
    entries_loaded: int
    namespaces: list[str]


class ReloadResponse(BaseModel):
    """Response model for /reload endpoint."""

    status: str
    version: int
    entries_loaded: int


class RegexForgeServer:
    """Server wrapper for managing state."""

    def __init__(self, config: Optional[dict[str, Any]] = None) -> None:
        """Initialize server with configuration."""
        self.config = config or {}
        self.catalog: Optional[PatternCatalog] = None
        self.engine: Optional[Engine] = None
        self._load_catalog()

    def _load_catalog(self) -> None:
        """Load catalog and build the engine from configuration."""
        paths = self.config.get("catalog", {}).get("paths")
        generator_config = self.config.get("generator", {})

        logger.info(f"Loading catalog from: {paths}")
        self.catalog = load_catalog(paths=paths)
        self.engine = Engine(
            self.catalog,
            generator=StringGenerator(seed=generator_config.get("seed")),
            default_max_length=generator_config.get("max_length", 16),
        )
        logger.info(f"Loaded {len(self.catalog)} catalog entries")

    def reload_catalog(self) -> dict[str, Any]:
        """Reload catalog from files."""
        try:
            old_version = self.catalog.version if self.catalog else 0
            self._load_catalog()
            return {
                "status": "ok",
                "version": self.catalog.version if self.catalog else 0,
                "entries_loaded": len(self.catalog) if self.catalog else 0,
                "message": f"Reloaded successfully (v{old_version} -> v{self.catalog.version})",
            }
        except Exception as e:
            logger.error(f"Failed to reload catalog: {e}")
            raise HTTPException(status_code=500, detail=f"Reload failed: {str(e)}")


def create_app(config: Optional[dict[str, Any]] = None) -> FastAPI:
    """
    Create FastAPI application.

    Args:
        config: Server configuration dictionary

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="regex-forge",
        description="Regex extraction, identifiable-information scanning and synthesis service",
        version=__version__,
    )

    server = RegexForgeServer(config)

    def get_engine() -> Engine:
        if server.engine is None:
            raise HTTPException(status_code=500, detail="Engine not initialized")
        return server.engine

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next: Any) -> Response:
        """Record metrics for each request."""
        start_time = time.time()
        endpoint = request.url.path

        response = await call_next(request)

        duration = time.time() - start_time
        REQUEST_COUNT.labels(endpoint=endpoint, status=response.status_code).inc()
        REQUEST_DURATION.labels(endpoint=endpoint).observe(duration)

        return response

    @app.post("/validate", response_model=ValidateResponse)
    async def validate(request: ValidateRequest) -> ValidateResponse:
        """Check whether a pattern compiles."""
        try:
            ok = get_engine().validate(request.pattern, parse_options(request.flags))
        except RegexForgeError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return ValidateResponse(ok=ok, pattern=request.pattern)

    @app.post("/extract", response_model=ExtractResponse)
    async def extract(request: ExtractRequest) -> ExtractResponse:
        """Extract matches and capture groups."""
        try:
            found = get_engine().extract(
                request.pattern,
                request.text,
                options=parse_options(request.flags),
                limit=request.limit,
            )
        except RegexForgeError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return ExtractResponse(matches=[list(groups) for groups in found], count=len(found))

    @app.post("/scan", response_model=ScanResponse)
    async def scan(request: ScanRequest) -> ScanResponse:
        """Find identifiable information in text."""
        try:
            result = get_engine().scan(request.text, names=request.entries)
        except RegexForgeError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.error(f"Scan error: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        for category in result.hits:
            CATEGORY_HITS.labels(category=category).inc()

        return ScanResponse(
            hits=result.hits,
            count=result.match_count,
            entries_searched=result.entries_searched,
        )

    @app.post("/generate", response_model=GenerateResponse)
    async def generate(request: GenerateRequest) -> GenerateResponse:
        """Generate example strings matching a pattern."""
        engine = get_engine()
        try:
            values = [
                engine.synthesize(request.pattern, request.max_length)
                for _ in range(request.count)
            ]
        except RegexForgeError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return GenerateResponse(pattern=request.pattern, values=values)

    @app.post("/range", response_model=RangeResponse)
    async def range_(request: RangeRequest) -> RangeResponse:
        """Generate regexes for integers compared against a bound."""
        try:
            result = get_engine().range_regex(request.bound, request.comparison, request.sql)
        except RegexForgeError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return RangeResponse(
            bound=result.bound,
            comparison=result.comparison.value,
            alternatives=result.alternatives,
        )

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Health check endpoint."""
        if server.catalog is None:
            raise HTTPException(status_code=503, detail="Catalog not initialized")

        return HealthResponse(
            status="healthy",
            version=__version__,
            entries_loaded=len(server.catalog),
            namespaces=server.catalog.namespaces,
        )

    @app.post("/reload", response_model=ReloadResponse)
    async def reload() -> ReloadResponse:
        """Reload catalog from files."""
        result = server.reload_catalog()
        return ReloadResponse(**result)

    @app.get("/metrics")
    async def metrics() -> Response:
        """Prometheus metrics endpoint."""
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app


# For running directly with uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8080)

"""FastAPI web server for the profilesift pipeline."""

from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import datetime

import httpx
from fastapi import Depends, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from profilesift import ProfileAnalyzer, AnalyzerConfig, __version__
from profilesift.core.exporter import to_dict
from profilesift.exceptions import AuthError, PreconditionError
from profilesift.logging import get_logger
from profilesift.models.result import AnalysisResult, ErrorResponse

# Resolves a bearer token to True when the caller is allowed in
TokenVerifier = Callable[[str], Awaitable[bool]]


# Request/Response models
class AnalyzeRequest(BaseModel):
    """Request body for profile analysis."""

    url: str | None = Field(default=None, description="Public profile URL to analyze")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str


class ConfigResponse(BaseModel):
    """Non-secret view of the active pipeline configuration."""

    scrape_configured: bool = Field(
        ...,
        description="Whether a scraping service API key is set.",
    )
    llm_configured: bool = Field(
        ...,
        description="Whether a completion service API key is set.",
    )
    scrape_api_url: str = Field(..., description="Scraping service endpoint.")
    scrape_wait_for_ms: int = Field(
        ...,
        description="Server-side wait in milliseconds before page content is captured.",
        json_schema_extra={"example": 3000},
    )
    completion_api_url: str = Field(..., description="Chat completion service endpoint.")
    llm_model: str = Field(
        ...,
        description="Model used for structured extraction.",
        json_schema_extra={"example": "google/gemini-2.5-flash"},
    )
    llm_temperature: float = Field(..., description="Sampling temperature for extraction.")
    max_content_chars: int = Field(
        ...,
        description="Maximum number of scraped characters embedded in the extraction prompt.",
        json_schema_extra={"example": 8000},
    )
    log_level: str = Field(..., description="Logging verbosity level.")


async def require_caller(
    request: Request,
    authorization: str | None = Header(default=None),
) -> str:
    """Reject requests without a bearer token, or with one the verifier refuses."""
    if not authorization:
        raise AuthError()

    token = authorization.removeprefix("Bearer ").strip()
    verifier: TokenVerifier | None = request.app.state.token_verifier
    if verifier is not None and not await verifier(token):
        raise AuthError("Invalid token")
    return token


def create_app(
    config: AnalyzerConfig | None = None,
    client: httpx.AsyncClient | None = None,
    token_verifier: TokenVerifier | None = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        config: Pipeline configuration, read from the environment if None
        client: HTTP client for the external services; created per app if None
        token_verifier: Async callable validating bearer tokens; when None
            any non-empty Authorization header is accepted

    Returns:
        Configured FastAPI app
    """
    config = config or AnalyzerConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage analyzer lifecycle."""
        async with ProfileAnalyzer(config, client) as analyzer:
            app.state.analyzer = analyzer
            yield

    app = FastAPI(
        title="profilesift API",
        description="Social profile signal extraction for fraud-risk scoring",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.token_verifier = token_verifier
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PreconditionError)
    async def precondition_error_handler(request: Request, exc: PreconditionError):
        get_logger("api").warning(
            "request_rejected",
            path=request.url.path,
            status=exc.status_code,
            error=exc.message,
        )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        get_logger("api").exception("internal_error", path=request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health_check():
        """Check API health status."""
        return HealthResponse(
            status="healthy",
            version=__version__,
            timestamp=datetime.now().isoformat(),
        )

    @app.post(
        "/api/scrape-profile",
        response_model=AnalysisResult,
        responses={
            400: {"model": ErrorResponse},
            401: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
        },
        tags=["Analysis"],
    )
    async def scrape_profile(
        body: AnalyzeRequest,
        request: Request,
        _token: str = Depends(require_caller),
    ):
        """
        Scrape a public profile URL and return normalized metrics.

        External service failures never fail the request; they surface as
        `confidence: "low"` with an explanatory `notes` field.
        """
        analyzer: ProfileAnalyzer = request.app.state.analyzer
        try:
            result = await analyzer.analyze(body.url)
        except PreconditionError:
            raise
        except Exception:
            # App-level Exception handlers run outside CORSMiddleware
            get_logger("api").exception("analysis_failed", path=request.url.path)
            return JSONResponse(status_code=500, content={"error": "Internal server error"})
        return to_dict(result)

    @app.get("/api/config", response_model=ConfigResponse, tags=["System"])
    async def get_config():
        """
        Get the active pipeline configuration, without credentials.

        **Configuration is set via environment variables** with the `PROFILESIFT_` prefix:
        - `PROFILESIFT_FIRECRAWL_API_KEY`
        - `PROFILESIFT_LLM_API_KEY`
        - `PROFILESIFT_LLM_MODEL`
        """
        return ConfigResponse(
            scrape_configured=bool(config.firecrawl_api_key),
            llm_configured=bool(config.llm_api_key),
            scrape_api_url=config.scrape_api_url,
            scrape_wait_for_ms=config.scrape_wait_for_ms,
            completion_api_url=config.completion_api_url,
            llm_model=config.llm_model,
            llm_temperature=config.llm_temperature,
            max_content_chars=config.max_content_chars,
            log_level=config.log_level,
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

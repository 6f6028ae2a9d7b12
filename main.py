"""
Main API module for TinyURL Platform.

Responsibilities:
    - Expose REST endpoints for creating short links, redirecting and reading metadata
    - Validate request payloads (URL scheme/host/length, expiry days)
    - Rate-limit link creation per client
    - Map engine errors to HTTP status codes
    - Expose redirect metrics to authenticated operators

Architecture:
    - App Factory pattern (create_app) for test isolation and DI.
    - Storage chosen by the storage factory; metrics in-memory by default.
    - The ShorteningEngine owns dedupe, expiry and hit counting; routes only translate.

LLM Prompt Example:
    "Explain how to structure a FastAPI service with an application factory,
    injected dependencies, and a clean separation between API and business logic."
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator

from auth.dependencies import get_current_user
from tinyurl_platform.analytics.analytics import RedirectMetrics
from tinyurl_platform.analytics.base import BaseMetrics
from tinyurl_platform.config import MAX_EXPIRY_DAYS, MAX_URL_LENGTH, ShortenerConfig, settings
from tinyurl_platform.errors import Conflict, ExhaustedRetries, Gone, NotFound
from tinyurl_platform.manager.shortening_engine import ShorteningEngine
from tinyurl_platform.models import UrlMapping
from tinyurl_platform.ratelimit import FixedWindowRateLimiter
from tinyurl_platform.storage.base import BaseStorage
from tinyurl_platform.storage.storage_factory import get_storage

log = logging.getLogger("tinyurl")


class CreateRequest(BaseModel):
    """Request payload for creating a new short link."""

    model_config = ConfigDict(populate_by_name=True)

    long_url: str = Field(..., alias="longUrl", max_length=MAX_URL_LENGTH)
    expiry_days: Optional[int] = Field(None, alias="expiryDays", ge=0, le=MAX_EXPIRY_DAYS)

    @field_validator("long_url")
    @classmethod
    def _validate_url(cls, value: str) -> str:
        """Require an http/https scheme and a host; the URL is otherwise stored as given."""
        if not value or not value.strip():
            raise ValueError("URL is required")
        parsed = urlparse(value)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError("Invalid URL format")
        return value


def _metadata(mapping: UrlMapping) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "code": mapping.code,
        "longUrl": mapping.long_url,
        "createdAt": mapping.created_at.isoformat(),
        "hitCount": mapping.hit_count,
    }
    if mapping.expires_at is not None:
        body["expiresAt"] = mapping.expires_at.isoformat()
    return body


def create_app(
    storage: Optional[BaseStorage] = None,
    metrics: Optional[BaseMetrics] = None,
    config: Optional[ShortenerConfig] = None,
    rate_limit_per_minute: Optional[int] = None,
) -> FastAPI:
    """
    Factory function to build and configure a new FastAPI app instance.

    Args:
        storage (Optional[BaseStorage]): Backend; chosen from env when omitted.
        metrics (Optional[BaseMetrics]): Metrics sink; in-memory RedirectMetrics when omitted.
        config (Optional[ShortenerConfig]): Engine config; built from settings when omitted.
        rate_limit_per_minute (Optional[int]): Create requests per client per minute; 0 disables.

    Returns:
        FastAPI: A fully configured application instance with isolated state.

    Why an app factory?
        - Enables per-test isolation in pytest.
        - Encourages dependency injection and easy swapping of implementations.
        - Avoids accidental global state across workers/processes.
    """
    app = FastAPI(
        title="TinyURL Platform",
        description="URL shortener with random Base62 codes, expiry and hit counting",
        docs_url="/docs",
    )

    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO)

    # ----------------------------------------------------------------
    # Per-app instances (isolated for tests, swappable for production)
    # ----------------------------------------------------------------
    storage = storage if storage is not None else get_storage()
    metrics = metrics if metrics is not None else RedirectMetrics()
    engine = ShorteningEngine(
        storage=storage,
        config=config or ShortenerConfig.from_settings(),
        metrics=metrics,
    )
    limiter = FixedWindowRateLimiter(
        settings.RATE_LIMIT_PER_MINUTE if rate_limit_per_minute is None else rate_limit_per_minute
    )

    app.state.engine = engine
    app.state.metrics = metrics
    app.state.limiter = limiter

    log.info(
        "TinyURL storage=%s base_url=%s default_expiry_days=%s",
        type(storage).__name__,
        engine.config.base_url,
        engine.config.default_expiry_days,
    )

    # ----------------------------------------------------------------
    # Routes
    # ----------------------------------------------------------------
    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post("/api/urls", status_code=status.HTTP_201_CREATED)
    def create_short_url(req: CreateRequest, request: Request) -> Dict[str, Any]:
        """
        Create (or reuse) a short link for a given URL.

        Returns:
            dict: code, shortUrl and longUrl.

        Raises:
            HTTPException: 429 when rate limited, 400 for an out-of-range expiry,
                503 when no code could be allocated.
        """
        client = request.client.host if request.client else "unknown"
        if not limiter.try_acquire(client):
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Rate limit exceeded. Try again later.",
            )

        try:
            mapping = engine.create(req.long_url, req.expiry_days)
        except (ExhaustedRetries, Conflict) as exc:
            log.error("Short code allocation failed: %s", exc)
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
        except ValueError as ve:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(ve))

        return {
            "code": mapping.code,
            "shortUrl": engine.build_short_url(mapping.code),
            "longUrl": mapping.long_url,
        }

    @app.get("/r/{code}")
    def redirect_to_long_url(code: str) -> RedirectResponse:
        """
        Resolve a code, count the hit and redirect with 302.

        Raises:
            HTTPException: 404 for unknown codes, 410 for expired ones.
        """
        try:
            mapping = engine.resolve(code)
        except NotFound:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Short URL not found")
        except Gone:
            raise HTTPException(status_code=status.HTTP_410_GONE, detail="Short URL has expired")
        return RedirectResponse(url=mapping.long_url, status_code=status.HTTP_302_FOUND)

    @app.get("/api/urls/{code}")
    def get_url_metadata(code: str) -> Dict[str, Any]:
        """Metadata for a code, including expired ones; 404 when unknown."""
        mapping = engine.get_metadata(code)
        if mapping is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Short URL not found")
        return _metadata(mapping)

    @app.get("/api/metrics/redirects")
    def redirect_metrics(user: str = Depends(get_current_user)) -> Dict[str, Any]:
        """Redirect outcome counters; operators only."""
        summary = getattr(metrics, "summary", None)
        if summary is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Metrics backend has no summary")
        return summary()

    return app


# `uvicorn main:app --reload` and `from main import app` continue to work.
app = create_app()

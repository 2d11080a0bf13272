import time
import asyncio
import logging
import threading
from functools import lru_cache
from typing import Optional, List

from fastapi import FastAPI, HTTPException, Query, Depends, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..config import DEFAULT_INDUSTRY
from ..exceptions import InvalidUrl, CacheUnavailable, ExtractionCancelled
from ..extractors.website import WebsiteExtractor
from ..utils import url as url_utils
from ..utils.cache import ResultCache
from ..utils.color import normalize_hex_color

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Brand Bot API",
    description="API for extracting company logos and brand colors from websites",
    version="1.0.0"
)

# The wizard front end calls this API from the browser
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


# Define request and response models
class ExtractionRequest(BaseModel):
    url: Optional[str] = Field(None, description="URL of the website to extract brand data from")
    force_refresh: bool = Field(False, description="Whether to bypass cache")


class ExtractionResponse(BaseModel):
    url: str = Field(..., description="URL as submitted")
    logo: str = Field(..., description="Logo URL or data URL")
    brand_color: str = Field(..., description="Brand color as a hex token")
    industry: str = Field(..., description="Best-effort industry guess")
    alternativeLogos: List[str] = Field(default_factory=list, description="Other logo candidates, best first")
    execution_time: float = Field(..., description="Execution time in seconds")


class ConfirmationRequest(BaseModel):
    url: Optional[str] = Field(None, description="URL the brand data belongs to")
    logo: str = Field(..., description="Reviewed logo, a URL or an uploaded data URL")
    brand_color: str = Field(..., description="Reviewed brand color")
    industry: Optional[str] = Field(None, description="Reviewed industry")


class ConfirmationResponse(BaseModel):
    url: str
    logo: str
    brand_color: str
    industry: str
    saved: bool = Field(..., description="Whether the confirmed values were stored")
    message: str


@lru_cache()
def get_cache() -> ResultCache:
    return ResultCache()


def get_extractor(cache: ResultCache = Depends(get_cache)) -> WebsiteExtractor:
    return WebsiteExtractor(cache=cache)


def _require_url(url: Optional[str]) -> str:
    """Reject missing or malformed URLs before any extraction work"""
    if not url or not url.strip():
        raise HTTPException(status_code=400, detail="URL is required")
    try:
        url_utils.normalize_website_url(url)
    except InvalidUrl as e:
        raise HTTPException(status_code=400, detail=f"Please enter a valid URL: {e}")
    return url.strip()


# API routes
@app.get("/")
def root():
    """Root endpoint returning API information"""
    return {
        "name": "Brand Bot API",
        "version": "1.0.0",
        "description": "API for extracting company logos and brand colors from websites",
        "documentation": "/docs"
    }


async def _watch_disconnect(request: Request, cancel_event: threading.Event, interval: float = 0.5):
    """Set cancel_event once the client has gone away"""
    while not cancel_event.is_set():
        if await request.is_disconnected():
            logger.info("Client disconnected, abandoning extraction")
            cancel_event.set()
            return
        await asyncio.sleep(interval)


@app.post("/extract", response_model=ExtractionResponse)
async def extract_brand(body: ExtractionRequest, request: Request,
                        extractor: WebsiteExtractor = Depends(get_extractor)):
    """
    Extract logo, brand color and industry from a website

    Always answers with usable values; when the site cannot be analysed
    the response carries fallback values instead of an error. The
    extraction runs in the threadpool and is abandoned, without caching,
    if the client disconnects first.
    """
    start_time = time.time()
    url = _require_url(body.url)

    cancel_event = threading.Event()
    watcher = asyncio.create_task(_watch_disconnect(request, cancel_event))
    try:
        result = await run_in_threadpool(
            extractor.extract,
            url,
            force_refresh=body.force_refresh,
            cancel_event=cancel_event
        )
    except ExtractionCancelled:
        # Client is gone, nothing to render
        return Response(status_code=499)
    finally:
        watcher.cancel()

    return ExtractionResponse(
        url=result.source_url,
        logo=result.logo_url,
        brand_color=result.brand_color,
        industry=result.industry,
        alternativeLogos=result.alternative_logo_urls,
        execution_time=time.time() - start_time
    )


@app.post("/confirm", response_model=ConfirmationResponse)
def confirm_brand(request: ConfirmationRequest, cache: ResultCache = Depends(get_cache)):
    """
    Store the values a user reviewed and possibly overrode

    The confirmed logo and color replace whatever was extracted for the
    URL, so later lookups return the user's choice. Confirmed records
    restart the cache age and are never corrected from the known-brand
    table.
    """
    url = _require_url(request.url)

    brand_color = normalize_hex_color(request.brand_color)
    if not brand_color:
        raise HTTPException(status_code=400, detail=f"Invalid brand color: {request.brand_color}")

    logo = request.logo.strip()
    if not logo:
        raise HTTPException(status_code=400, detail="Logo is required")

    industry = (request.industry or "").strip() or DEFAULT_INDUSTRY
    fields = {
        'logo': logo,
        'brand_color': brand_color,
        'industry': industry,
        'confirmed': True,
        'timestamp': time.time(),
    }

    try:
        record = cache.get(url)
        if record is not None:
            alternatives = [alt for alt in record.get('alternativeLogos') or [] if alt != logo]
            cache.patch(url, dict(fields, alternativeLogos=alternatives))
        else:
            cache.put(dict(fields, url=url, alternativeLogos=[]))
        saved, message = True, "Company details saved successfully"
    except CacheUnavailable as e:
        logger.warning("Could not store confirmed values for %s: %s", url, e)
        saved, message = False, "Company details could not be saved"

    return ConfirmationResponse(
        url=url,
        logo=logo,
        brand_color=brand_color,
        industry=industry,
        saved=saved,
        message=message
    )


@app.get("/cache", response_model=dict)
def get_cache_info(url: str = Query(..., description="URL to get cache info for"),
                   cache: ResultCache = Depends(get_cache)):
    """
    Get cached information for a website

    This endpoint returns the cached extraction result for a submitted URL.
    """
    try:
        cache_data = cache.get(url)
    except CacheUnavailable as e:
        raise HTTPException(status_code=500, detail=f"Error accessing cache: {e}")

    if cache_data:
        return {
            "url": url,
            "has_cache": True,
            "cache_data": cache_data
        }
    return {
        "url": url,
        "has_cache": False,
        "message": "No cache found for this URL"
    }


@app.delete("/cache")
def clear_cache(url: Optional[str] = Query(None, description="URL to clear cache for (optional, clears all if not provided)"),
                cache: ResultCache = Depends(get_cache)):
    """
    Clear cache for a website or all websites
    """
    try:
        count = cache.clear(url)
    except CacheUnavailable as e:
        raise HTTPException(status_code=500, detail=f"Error clearing cache: {e}")

    return {
        "success": True,
        "message": f"Cleared cache for {url}" if url else "Cleared all cache",
        "files_removed": count
    }

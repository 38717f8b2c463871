"""API routes implementation."""

from typing import Optional

from fastapi import APIRouter, Request, HTTPException, status
from fastapi.responses import JSONResponse

from .schemas import (
    ShortenRequest,
    BatchShortenRequest,
    BatchShortenResponse,
    ShortURLResponse,
    EntryError,
    AnalyticsResponse,
    ClickEventResponse,
    SweepResponse,
    HealthResponse,
    ErrorResponse,
    StatisticsResponse,
)
from shortlinks.common.headers import build_base_url
from shortlinks.common.url_builder import build_short_url, format_time_remaining, sort_records_for_display
from shortlinks.common.validators import ShortenEntry
from shortlinks.errors import ShortCodeGenerationError, ShortenerError, ValidationError
from shortlinks.store.models import ClickEvent, UrlRecord

router = APIRouter()


def _short_url_for(request: Request, short_code: str) -> str:
    config = request.app.state.config
    base_url = build_base_url(
        headers=dict(request.headers),
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )
    return build_short_url(
        short_code=short_code,
        base_url=base_url,
        path_prefix=config.path_prefix,
    )


def _record_response(
    request: Request,
    record: UrlRecord,
    now: int,
    click_count: Optional[int] = None,
) -> ShortURLResponse:
    return ShortURLResponse(
        id=record.id,
        short_code=record.short_code,
        short_url=_short_url_for(request, record.short_code),
        original_url=record.original_url,
        created_at=record.created_at,
        expires_at=record.expires_at,
        validity_minutes=record.validity_minutes,
        is_custom=record.is_custom,
        expired=record.is_expired(now),
        time_remaining=format_time_remaining(record.expires_at, now),
        click_count=click_count,
    )


def _click_response(event: ClickEvent) -> ClickEventResponse:
    location = event.approx_location
    return ClickEventResponse(
        timestamp=event.timestamp,
        referrer_info={
            "referrer": event.referrer_info.referrer,
            "user_agent": event.referrer_info.user_agent,
            "timestamp": event.referrer_info.timestamp,
        },
        approx_location=location.to_dict() if location else None,
    )


def _entry_error(index: Optional[int], error: ShortenerError) -> EntryError:
    if isinstance(error, ValidationError):
        data = error.to_dict()
        if data["index"] is None:
            data["index"] = index
        return EntryError(**data)
    return EntryError(index=index, field="store", message=str(error))


@router.post(
    "/shorten",
    response_model=ShortURLResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        409: {"model": ErrorResponse, "description": "Short code already exists"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Create short URL",
    description="Create a shortened URL. Optionally provide a validity and a custom short code.",
)
async def shorten_url(request: Request, body: ShortenRequest):
    """Create a shortened URL."""
    service = request.app.state.service

    try:
        record = await service.create_short_url(
            original_url=body.url,
            validity_minutes=body.validity_minutes,
            custom_short_code=body.custom_code,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT if e.duplicate else status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    except ShortCodeGenerationError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )

    return _record_response(request, record, service.clock())


@router.post(
    "/shorten/batch",
    response_model=BatchShortenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": BatchShortenResponse, "description": "No entry could be shortened"},
    },
    summary="Create several short URLs",
    description="Shorten up to the configured number of URLs. Each entry is validated independently.",
)
async def shorten_batch(request: Request, body: BatchShortenRequest):
    """Create short URLs for a batch of entries."""
    service = request.app.state.service

    entries = [
        ShortenEntry(
            original_url=item.original_url,
            validity_minutes=item.validity_minutes,
            custom_short_code=item.custom_short_code,
            use_custom=item.use_custom,
        )
        for item in body.urls
    ]

    try:
        result = await service.create_short_urls(entries)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    now = service.clock()
    response = BatchShortenResponse(
        results=[_record_response(request, result.created[i], now) for i in sorted(result.created)],
        errors=[_entry_error(i, result.errors[i]) for i in sorted(result.errors)],
    )

    if not result.created:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=response.model_dump())
    return response


@router.get(
    "/urls",
    response_model=list[ShortURLResponse],
    summary="List short URLs",
    description="List every stored short URL, newest first. Expired URLs stay listed until swept.",
)
async def list_urls(request: Request):
    """List stored short URLs."""
    service = request.app.state.service

    records = sort_records_for_display(await service.list_records())
    analytics = await service.store.get_analytics()
    now = service.clock()

    return [
        _record_response(request, r, now, click_count=len(analytics.get(r.short_code, [])))
        for r in records
    ]


@router.delete(
    "/urls",
    summary="Clear all data",
    description="Erase every short URL and all click analytics.",
)
async def clear_urls(request: Request):
    """Erase all records and analytics."""
    service = request.app.state.service

    await service.clear_all()

    return {"cleared": True}


@router.get(
    "/urls/{short_code}",
    response_model=ShortURLResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Short code not found"},
    },
    summary="Get URL information",
    description="Get information about a shortened URL including its click count.",
)
async def get_url_info(request: Request, short_code: str):
    """Get information about a shortened URL."""
    service = request.app.state.service

    record = await service.get_record(short_code)

    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Short code '{short_code}' not found",
        )

    clicks = await service.get_analytics(short_code)
    return _record_response(request, record, service.clock(), click_count=len(clicks))


@router.get(
    "/urls/{short_code}/analytics",
    response_model=AnalyticsResponse,
    summary="Get click analytics",
    description="Raw click events recorded for a short code (empty if none).",
)
async def get_url_analytics(request: Request, short_code: str):
    """Get click events for a short code."""
    service = request.app.state.service

    clicks = await service.get_analytics(short_code)

    return AnalyticsResponse(
        short_code=short_code,
        total_clicks=len(clicks),
        clicks=[_click_response(c) for c in clicks],
    )


@router.post(
    "/sweep",
    response_model=SweepResponse,
    summary="Sweep expired URLs",
    description="Remove every short URL whose validity window has passed.",
)
async def sweep_expired(request: Request):
    """Remove expired records."""
    service = request.app.state.service

    removed = await service.sweep_expired()
    remaining = len(await service.list_records())

    return SweepResponse(removed=removed, remaining=remaining)


@router.get(
    "/stats",
    response_model=StatisticsResponse,
    summary="Get statistics",
    description="Get service-wide statistics.",
)
async def get_statistics(request: Request):
    """Get service statistics."""
    service = request.app.state.service

    stats = await service.get_statistics()

    return StatisticsResponse(**stats)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    service = request.app.state.service

    health = await service.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        store="healthy" if health["store"] else "unhealthy",
        timestamp=service.clock(),
    )

"""Redirect routes."""

from fastapi import APIRouter, Request, HTTPException, status
from fastapi.responses import RedirectResponse

from shortlinks.common.headers import client_context_from_headers
from shortlinks.resolver import ResolveStatus

router = APIRouter()

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate, max-age=0",
    "Pragma": "no-cache",
    "Expires": "0",
}


@router.get("/health", include_in_schema=False)
async def health_check_web(request: Request):
    """Health check endpoint (simple version for load balancers)."""
    service = request.app.state.service
    
    health = await service.health_check()
    
    if health["overall"]:
        return {"status": "healthy"}
    else:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service unhealthy",
        )


@router.get("/{short_code}", include_in_schema=False)
async def redirect_to_url(request: Request, short_code: str):
    """Redirect to the original URL, recording the click."""
    service = request.app.state.service
    
    context = getattr(request.state, "client_context", None)
    if context is None:
        context = client_context_from_headers(dict(request.headers))
    
    outcome = await service.resolve(short_code, client_context=context)
    
    if outcome.status is ResolveStatus.NOT_FOUND:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short URL not found",
            headers=NO_CACHE_HEADERS,
        )
    
    if outcome.status is ResolveStatus.FOUND_EXPIRED:
        raise HTTPException(
            status_code=status.HTTP_410_GONE,
            detail="This short URL has expired",
            headers=NO_CACHE_HEADERS,
        )
    
    # 302 so every visit comes back through here and gets counted
    return RedirectResponse(
        url=outcome.original_url,
        status_code=status.HTTP_302_FOUND,
        headers=NO_CACHE_HEADERS,
    )

"""Public redirect routes."""

from fastapi import APIRouter, Request, HTTPException, status
from fastapi.responses import RedirectResponse

router = APIRouter()


@router.get("/health", include_in_schema=False)
async def health_check_web(request: Request):
    """Health check endpoint (simple version for load balancers)."""
    health = await request.app.state.registry.health_check()
    
    if not health["overall"]:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service unhealthy",
        )
    return {"status": "healthy"}


@router.get("/{short_key}", include_in_schema=False)
async def redirect_to_destination(request: Request, short_key: str):
    """Redirect to the link's destination; unknown keys yield 404."""
    destination_url = await request.app.state.registry.get_destination(short_key)
    
    return RedirectResponse(url=destination_url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)

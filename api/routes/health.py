"""Health and info routes."""
from fastapi import APIRouter, Request
from models import HealthResponse
from routes.deps import get_app_state

router = APIRouter()


@router.get("/", include_in_schema=False)
def root():
    """Root endpoint with API information"""
    return {
        "message": "Notes Search API",
        "docs": "/docs",
        "health": "/health",
        "search": "/search?q="
    }


@router.get("/health", response_model=HealthResponse)
def health(request: Request):
    """
    Health check endpoint

    Returns index statistics and event counters
    """
    app_state = get_app_state(request)
    if app_state.is_closed():
        return HealthResponse(
            status="closed", backend=app_state.get_search_service().name,
            indexed_notes=0, pending_events=0, events_applied=0, events_failed=0
        )
    return HealthResponse(status="healthy", **app_state.get_stats())

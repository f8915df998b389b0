"""Search route module."""
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request
from models import SearchHit, SearchResponse
from routes.deps import get_app_state
from search.errors import IndexClosedError, QuerySyntaxError, SearchIndexError

router = APIRouter()


@router.get("/search", response_model=SearchResponse)
def search(request: Request,
           q: str = Query("", description="Full-text query"),
           limit: Optional[int] = Query(None, ge=1, le=1000, description="Maximum number of results")):
    """
    Full-text search over all notes

    Returns matching paragraphs and note names in backend rank order
    """
    app_state = get_app_state(request)
    try:
        results = app_state.query(q, limit=limit)
    except QuerySyntaxError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except IndexClosedError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except SearchIndexError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return SearchResponse(
        query=q,
        total_results=len(results),
        results=[SearchHit(**result.to_dict()) for result in results]
    )

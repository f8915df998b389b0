from pydantic import BaseModel, Field
from typing import List


class SearchHit(BaseModel):
    id: str = Field(..., description="<noteId>/paragraph/<paragraphId>, or <noteId> for note names")
    name: str = ""
    header: str = ""
    text: str
    snippet: str


class SearchResponse(BaseModel):
    query: str
    total_results: int
    results: List[SearchHit]


class HealthResponse(BaseModel):
    status: str
    backend: str
    indexed_notes: int
    pending_events: int
    events_applied: int
    events_failed: int

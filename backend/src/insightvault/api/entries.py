"""Analysis entry API endpoints."""

import logging

from fastapi import APIRouter, HTTPException, Query

from insightvault.dependencies import EntryServiceDep

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/entries")
async def list_entries(
    entry_service: EntryServiceDep,
    q: str | None = Query(None, description="Filter by title or analysis text"),
):
    """List saved analysis entries, most recent first."""
    entries = await entry_service.list_entries(query=q)

    return {"entries": [e.model_dump(mode="json") for e in entries], "total": len(entries)}


@router.get("/entries/{entry_id}")
async def get_entry(entry_id: str, entry_service: EntryServiceDep):
    """Get an analysis entry by ID."""
    entry = await entry_service.get(entry_id)

    if not entry:
        raise HTTPException(status_code=404, detail="Entry not found")

    return entry.model_dump(mode="json")


@router.delete("/entries/{entry_id}")
async def delete_entry(entry_id: str, entry_service: EntryServiceDep):
    """Delete an analysis entry. Deleting an unknown ID succeeds."""
    await entry_service.delete(entry_id)

    return {"status": "deleted"}

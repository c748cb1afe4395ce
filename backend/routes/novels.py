"""Novel content endpoints (list, read, import, delete)."""

from fastapi import APIRouter, HTTPException

from backend import sessions, storage
from novella.models import Novel

router = APIRouter()


@router.get("/novels")
async def list_novels():
    """List all stored novels (metadata only)."""
    return storage.list_novels()


@router.get("/novels/{novel_id}")
async def get_novel(novel_id: str):
    """Get a full novel in content format."""
    novel = storage.get_novel(novel_id)
    if not novel:
        raise HTTPException(404, "Novel not found")
    return novel.model_dump(by_alias=True, mode="json")


@router.put("/novels/{novel_id}")
async def put_novel(novel_id: str, body: Novel):
    """Import or replace a novel. The body id must match the path."""
    if body.id != novel_id:
        raise HTTPException(400, "Novel id does not match the URL")
    saved = storage.save_novel(body)
    # a running session would keep playing stale content
    sessions.close_session(novel_id)
    return saved.model_dump(by_alias=True, mode="json")


@router.delete("/novels/{novel_id}")
async def delete_novel(novel_id: str):
    """Delete a novel. Its save slot is kept."""
    if not storage.delete_novel(novel_id):
        raise HTTPException(404, "Novel not found")
    sessions.close_session(novel_id)
    return {"ok": True}

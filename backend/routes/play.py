"""Playback endpoints: one session per novel under /play/{novel_id}."""

from fastapi import APIRouter, HTTPException

from backend import sessions
from backend.sessions import PlaySession

from .models import ChooseBody, JumpBody, TickBody

router = APIRouter()


def _session(novel_id: str) -> PlaySession:
    session = sessions.get_session(novel_id)
    if session is None:
        raise HTTPException(404, "No play session, start the novel first")
    return session


def _session_or_open(novel_id: str) -> PlaySession:
    session = sessions.get_session(novel_id) or sessions.open_session(novel_id)
    if session is None:
        raise HTTPException(404, "Novel not found")
    return session


@router.post("/play/{novel_id}/start")
async def start(novel_id: str):
    """Open a fresh session and enter the start scene."""
    session = sessions.open_session(novel_id)
    if session is None:
        raise HTTPException(404, "Novel not found")
    return session.start()


@router.get("/play/{novel_id}")
async def get_view(novel_id: str):
    """Current render view of the session."""
    return _session(novel_id).view()


@router.post("/play/{novel_id}/advance")
async def advance(novel_id: str):
    """Finish the text reveal, or move to the next interactive node."""
    return _session(novel_id).advance()


@router.post("/play/{novel_id}/tick")
async def tick(novel_id: str, body: TickBody | None = None):
    """Reveal more of the current text."""
    return _session(novel_id).tick((body or TickBody()).count)


@router.post("/play/{novel_id}/choose")
async def choose(novel_id: str, body: ChooseBody):
    """Pick an option of the pending choice."""
    return _session(novel_id).choose(body.option_id)


@router.post("/play/{novel_id}/jump")
async def jump(novel_id: str, body: JumpBody):
    """Jump to any scene (preview from here). Opens a session if needed."""
    return _session_or_open(novel_id).jump(body.scene_id)


@router.post("/play/{novel_id}/save")
async def save(novel_id: str):
    """Save the session into the novel's slot (overwrites)."""
    session = _session(novel_id)
    data = session.save()
    if data is None:
        raise HTTPException(409, "Nothing to save, playback has not started")
    failed = [i for i in session.interpreter.last_issues if i.kind == "save_failed"]
    if failed:
        raise HTTPException(500, failed[0].message)
    return data.model_dump(by_alias=True)


@router.post("/play/{novel_id}/load")
async def load(novel_id: str):
    """Restore the novel's save slot. Opens a session if needed."""
    return _session_or_open(novel_id).load()


@router.get("/play/{novel_id}/save")
async def save_info(novel_id: str):
    """Save slot metadata ({"saved_at": ...})."""
    info = _session_or_open(novel_id).slots.info(novel_id)
    if info is None:
        raise HTTPException(404, "No save found")
    return info


@router.delete("/play/{novel_id}/save")
async def delete_save(novel_id: str):
    """Delete the novel's save slot."""
    if not _session_or_open(novel_id).slots.delete(novel_id):
        raise HTTPException(404, "No save found")
    return {"ok": True}


@router.delete("/play/{novel_id}")
async def end_session(novel_id: str):
    """Close the play session."""
    if not sessions.close_session(novel_id):
        raise HTTPException(404, "No play session")
    return {"ok": True}

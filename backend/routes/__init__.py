"""FastAPI API endpoints under /api.

Endpoint groups: health + settings, novels (content loader / import), and
play (one session per novel: start, advance, tick, choose, jump, save, load).
Every play endpoint returns the session view: snapshot, stage, text reveal
state, and the audio cues emitted since the previous call.
"""

from fastapi import APIRouter

from .novels import router as novels_router
from .play import router as play_router
from .settings import router as settings_router

router = APIRouter()
router.include_router(settings_router)
router.include_router(novels_router)
router.include_router(play_router)

"""Play sessions: the host side of the interpreter.

One in-process session per novel id (single player, no concurrency between
players). A session owns:

  interpreter  cursor + presentation state, saves through FileSaveStore
  typewriter   text reveal for the current interactive node
  mixer        audio state; its recorded cues are forwarded to the client

Host rule for advance: if the current text is still revealing, complete the
reveal instead of moving the cursor.

The view returned to the client:
  {"snapshot": {...}, "stage": {...}, "text": {...}, "audio": [...], "has_save": bool}
"""

import logging
import threading
from typing import Any, Callable

from backend import storage
from novella.assets import describe_stage
from novella.audio import AudioMixer
from novella.interpreter import Interpreter
from novella.models import ChoiceNode, DialogueNode, NarrationNode, Novel, Snapshot
from novella.saves import SaveData, SaveSlots
from novella.typewriter import Typewriter

logger = logging.getLogger(__name__)

_sessions: dict[str, "PlaySession"] = {}
_registry_lock = threading.Lock()


def _node_text(snapshot: Snapshot) -> str:
    node = snapshot.node
    if isinstance(node, (DialogueNode, NarrationNode)):
        return node.text
    if isinstance(node, ChoiceNode):
        return node.prompt or ""
    return ""


class PlaySession:
    def __init__(self, novel_id: str, novel: Novel, config: dict[str, Any]) -> None:
        self.novel_id = novel_id
        self.novel = novel
        self.mixer = AudioMixer()
        self.slots = SaveSlots(storage.FileSaveStore())
        self.interpreter = Interpreter(
            novel,
            audio=self.mixer,
            saves=self.slots,
            novel_id=novel_id,
            fade_out_ms=config["fade_out_ms"],
            max_entry_jumps=config["max_entry_jumps"],
        )
        self.typewriter = Typewriter(
            chars_per_tick=config["chars_per_tick"],
            interval_ms=config["text_speed_ms"],
        )
        self.autosave_on_choice = config["autosave_on_choice"]
        self._lock = threading.Lock()
        self._snapshot = self.interpreter.snapshot()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def start(self) -> dict[str, Any]:
        with self._lock:
            return self._after(self.interpreter.start)

    def advance(self) -> dict[str, Any]:
        with self._lock:
            if not self.typewriter.is_complete:
                self.typewriter.skip_to_end()
                return self._view(self._snapshot)
            return self._after(self.interpreter.advance)

    def tick(self, count: int = 1) -> dict[str, Any]:
        with self._lock:
            for _ in range(max(count, 0)):
                if self.typewriter.is_complete:
                    break
                self.typewriter.tick()
            return self._view(self._snapshot)

    def choose(self, option_id: str) -> dict[str, Any]:
        with self._lock:
            before = self.interpreter.transitions
            view = self._after(lambda: self.interpreter.choose(option_id))
            if self.autosave_on_choice and self.interpreter.transitions != before:
                self.interpreter.save()
                view["has_save"] = self.slots.has_save(self.novel_id)
            return view

    def jump(self, scene_id: str) -> dict[str, Any]:
        with self._lock:
            return self._after(lambda: self.interpreter.jump(scene_id))

    def save(self) -> SaveData | None:
        with self._lock:
            return self.interpreter.save()

    def load(self) -> dict[str, Any]:
        with self._lock:
            return self._after(self.interpreter.load)

    def view(self) -> dict[str, Any]:
        with self._lock:
            return self._view(self._snapshot)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _after(self, operation: Callable[[], Snapshot]) -> dict[str, Any]:
        """Run an interpreter call; restart the reveal if the cursor moved."""
        before = self.interpreter.transitions
        snapshot = operation()
        if self.interpreter.transitions != before:
            self.typewriter.restart(_node_text(snapshot))
        # issues are reported once, not on every later view
        self._snapshot = snapshot.model_copy(update={"issues": []})
        return self._view(snapshot)

    def _view(self, snapshot: Snapshot) -> dict[str, Any]:
        return {
            "snapshot": snapshot.model_dump(by_alias=True, mode="json"),
            "stage": describe_stage(snapshot, self.novel),
            "text": {
                "displayed": self.typewriter.displayed_text,
                "complete": self.typewriter.is_complete,
                "interval_ms": self.typewriter.interval_ms,
            },
            "audio": [cue.model_dump(mode="json") for cue in self.mixer.drain_events()],
            "has_save": self.slots.has_save(self.novel_id),
        }


# ----------------------------------------------------------------------
# Registry
# ----------------------------------------------------------------------


def open_session(novel_id: str) -> PlaySession | None:
    """Create (or replace) the session for a novel. None if the novel is missing."""
    novel = storage.get_novel(novel_id)
    if novel is None:
        return None
    session = PlaySession(novel_id, novel, storage.get_config())
    with _registry_lock:
        _sessions[novel_id] = session
    logger.info("Opened play session for novel %s", novel_id)
    return session


def get_session(novel_id: str) -> PlaySession | None:
    with _registry_lock:
        return _sessions.get(novel_id)


def close_session(novel_id: str) -> bool:
    with _registry_lock:
        return _sessions.pop(novel_id, None) is not None


def close_all() -> None:
    with _registry_lock:
        _sessions.clear()

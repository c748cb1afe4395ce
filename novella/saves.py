"""Save/restore codec and the save-slot port.

One slot per novel, stored under the key "novel_save_<novelId>" in any
SaveStore. The blob is JSON in the shape:

    {
      "currentSceneId": "...",
      "currentNodeIndex": 3,
      "onScreenCharacters": [{"characterId": "...", "position": "left", "emotion": "happy"}],
      "currentBackgroundId": "..." | null,
      "currentBgmId": "..." | null,
      "savedAt": "2025-01-01T12:00:00+00:00"
    }

A save is restored verbatim: entry lookahead was already baked into the
cursor and state when it was taken.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Protocol

from pydantic import Field, ValidationError

from novella.errors import MalformedSave
from novella.models import CamelModel, OnScreenCharacter, PresentationState

logger = logging.getLogger(__name__)

SAVE_KEY_PREFIX = "novel_save_"


class SaveData(CamelModel):
    scene_id: str = Field(alias="currentSceneId")
    node_index: int = Field(alias="currentNodeIndex", ge=0)
    on_screen_characters: list[OnScreenCharacter] = Field(default_factory=list)
    current_background_id: str | None = None
    current_bgm_id: str | None = None
    saved_at: str

    @classmethod
    def capture(
        cls,
        scene_id: str,
        node_index: int,
        state: PresentationState,
        bgm_id: str | None,
    ) -> SaveData:
        copied = state.model_copy(deep=True)
        return cls(
            scene_id=scene_id,
            node_index=node_index,
            on_screen_characters=copied.on_screen_characters,
            current_background_id=copied.current_background_id,
            current_bgm_id=bgm_id,
            saved_at=datetime.now(timezone.utc).isoformat(),
        )

    def presentation(self) -> PresentationState:
        return PresentationState(
            on_screen_characters=[c.model_copy() for c in self.on_screen_characters],
            current_background_id=self.current_background_id,
            current_bgm_id=self.current_bgm_id,
        )


def encode_save(data: SaveData) -> str:
    return data.model_dump_json(by_alias=True)


def decode_save(raw: str) -> SaveData:
    """Parse a save blob. Raises MalformedSave on bad JSON or missing fields."""
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedSave(f"Save is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise MalformedSave("Save is not a JSON object")
    try:
        return SaveData.model_validate(payload)
    except ValidationError as e:
        raise MalformedSave(f"Save is missing or has invalid fields: {e.error_count()} error(s)") from e


# ---------------------------------------------------------------------------
# Storage port
# ---------------------------------------------------------------------------

class SaveStore(Protocol):
    """Minimal key-value store of opaque string blobs."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def has(self, key: str) -> bool: ...

    def remove(self, key: str) -> None: ...


class MemorySaveStore:
    def __init__(self) -> None:
        self._blobs: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._blobs.get(key)

    def set(self, key: str, value: str) -> None:
        self._blobs[key] = value

    def has(self, key: str) -> bool:
        return key in self._blobs

    def remove(self, key: str) -> None:
        self._blobs.pop(key, None)


def save_key(novel_id: str) -> str:
    return f"{SAVE_KEY_PREFIX}{novel_id}"


class SaveSlots:
    """One save slot per novel on top of a SaveStore. Writing overwrites."""

    def __init__(self, store: SaveStore) -> None:
        self._store = store

    def write(self, novel_id: str, data: SaveData) -> None:
        self._store.set(save_key(novel_id), encode_save(data))
        logger.debug("saved novel=%s scene=%s index=%d", novel_id, data.scene_id, data.node_index)

    def read(self, novel_id: str) -> SaveData | None:
        """Return the save, or None if there is none. Raises MalformedSave."""
        raw = self._store.get(save_key(novel_id))
        if raw is None:
            return None
        return decode_save(raw)

    def has_save(self, novel_id: str) -> bool:
        return self._store.has(save_key(novel_id))

    def delete(self, novel_id: str) -> bool:
        if not self.has_save(novel_id):
            return False
        self._store.remove(save_key(novel_id))
        return True

    def info(self, novel_id: str) -> dict[str, str] | None:
        """{"saved_at": ...} for an existing, readable save; else None."""
        try:
            data = self.read(novel_id)
        except MalformedSave as e:
            logger.warning("Unreadable save for novel %s: %s", novel_id, e)
            return None
        if data is None:
            return None
        return {"saved_at": data.saved_at}

"""Tests for the save codec and SaveSlots."""

import json

import pytest

from novella.errors import MalformedSave
from novella.models import OnScreenCharacter, PresentationState
from novella.saves import (
    SAVE_KEY_PREFIX,
    MemorySaveStore,
    SaveData,
    SaveSlots,
    decode_save,
    encode_save,
    save_key,
)


def _state():
    return PresentationState(
        on_screen_characters=[OnScreenCharacter(character_id="alice", position="left", emotion="happy")],
        current_background_id="bg-1",
        current_bgm_id="bgm-1",
    )


# ── codec ───────────────────────────────────────────────────


def test_encode_uses_wire_names():
    data = SaveData.capture("scene-a", 3, _state(), "bgm-1")
    payload = json.loads(encode_save(data))
    assert payload["currentSceneId"] == "scene-a"
    assert payload["currentNodeIndex"] == 3
    assert payload["onScreenCharacters"] == [
        {"characterId": "alice", "position": "left", "emotion": "happy"},
    ]
    assert payload["currentBackgroundId"] == "bg-1"
    assert payload["currentBgmId"] == "bgm-1"
    assert payload["savedAt"]


def test_capture_copies_state():
    state = _state()
    data = SaveData.capture("scene-a", 0, state, None)
    state.on_screen_characters[0].position = "right"
    assert data.on_screen_characters[0].position == "left"
    assert data.current_bgm_id is None


def test_decode_restores_presentation():
    data = decode_save(encode_save(SaveData.capture("scene-a", 2, _state(), "bgm-1")))
    assert data.scene_id == "scene-a"
    assert data.node_index == 2
    assert data.presentation() == _state()


def test_decode_accepts_null_ids():
    raw = json.dumps({
        "currentSceneId": "s", "currentNodeIndex": 0, "onScreenCharacters": [],
        "currentBackgroundId": None, "currentBgmId": None, "savedAt": "2025-01-01T00:00:00Z",
    })
    assert decode_save(raw).presentation() == PresentationState()


@pytest.mark.parametrize("raw", [
    "not json",
    "[1, 2]",
    json.dumps({"currentNodeIndex": 0, "savedAt": "x"}),
    json.dumps({"currentSceneId": "s", "currentNodeIndex": -1, "savedAt": "x"}),
    json.dumps({"currentSceneId": "s", "currentNodeIndex": 0, "savedAt": "x",
                "onScreenCharacters": [{"characterId": "a", "position": "top"}]}),
])
def test_decode_rejects_malformed(raw):
    with pytest.raises(MalformedSave):
        decode_save(raw)


# ── slots ───────────────────────────────────────────────────


def test_save_key_prefix():
    assert save_key("demo") == f"{SAVE_KEY_PREFIX}demo"
    assert save_key("demo") == "novel_save_demo"


def test_slots_write_read_overwrite():
    store = MemorySaveStore()
    slots = SaveSlots(store)
    assert slots.read("n1") is None
    assert not slots.has_save("n1")

    slots.write("n1", SaveData.capture("a", 1, _state(), "bgm-1"))
    slots.write("n1", SaveData.capture("b", 4, PresentationState(), None))
    assert store.has("novel_save_n1")
    loaded = slots.read("n1")
    assert (loaded.scene_id, loaded.node_index) == ("b", 4)


def test_slots_are_per_novel():
    slots = SaveSlots(MemorySaveStore())
    slots.write("n1", SaveData.capture("a", 1, _state(), None))
    assert slots.has_save("n1")
    assert not slots.has_save("n2")


def test_slots_delete():
    slots = SaveSlots(MemorySaveStore())
    slots.write("n1", SaveData.capture("a", 1, _state(), None))
    assert slots.delete("n1") is True
    assert slots.delete("n1") is False
    assert slots.read("n1") is None


def test_slots_info():
    store = MemorySaveStore()
    slots = SaveSlots(store)
    assert slots.info("n1") is None
    data = SaveData.capture("a", 1, _state(), None)
    slots.write("n1", data)
    assert slots.info("n1") == {"saved_at": data.saved_at}


def test_slots_info_on_corrupt_blob():
    store = MemorySaveStore()
    store.set(save_key("n1"), "{broken")
    slots = SaveSlots(store)
    assert slots.info("n1") is None
    with pytest.raises(MalformedSave):
        slots.read("n1")

"""The demo novel loads and plays through both branches."""

from backend import storage
from backend.demo import DEMO_NOVEL_ID, create_demo_data
from novella.interpreter import Interpreter
from novella.saves import MemorySaveStore, SaveSlots


def test_create_demo_data():
    novel = create_demo_data()
    assert storage.get_novel(DEMO_NOVEL_ID) == novel
    assert [s.id for s in novel.scenes()] == [
        "scene-wake", "scene-kitchen", "scene-sleep", "scene-oversleep",
    ]


def test_demo_clears_old_save():
    store = storage.FileSaveStore()
    store.set(f"novel_save_{DEMO_NOVEL_ID}", "{}")
    create_demo_data()
    assert not store.has(f"novel_save_{DEMO_NOVEL_ID}")


def _play_to_choice(audio):
    interp = Interpreter(create_demo_data(), audio=audio, saves=SaveSlots(MemorySaveStore()))
    snap = interp.start()
    assert snap.node.id == "wake-1"
    assert snap.presentation.current_background_id == "bg-bedroom"
    assert snap.presentation.current_bgm_id == "audio-bgm-calm"
    while snap.status == "playing":
        snap = interp.advance()
        assert snap.issues == []
    assert snap.node.id == "wake-choice"
    positions = {e.character_id: e.position for e in snap.presentation.on_screen_characters}
    assert positions == {"char-alice": "left", "char-bob": "right"}
    return interp


def test_demo_kitchen_branch(audio):
    interp = _play_to_choice(audio)
    assert ("play_one_shot", "audio-sfx-knock") in audio.calls

    snap = interp.choose("opt-coming")
    assert snap.scene_id == "scene-kitchen"
    assert snap.presentation.current_bgm_id == "audio-bgm-cheerful"
    while snap.status == "playing":
        snap = interp.advance()
    assert snap.status == "ended"
    assert snap.node.id == "kitchen-4"
    assert snap.presentation.current_bgm_id is None
    assert audio.calls[-1] == ("fade_out_and_stop", 1500)


def test_demo_sleep_branch_follows_entry_jump(audio):
    interp = _play_to_choice(audio)
    snap = interp.choose("opt-sleep")
    assert snap.scene_id == "scene-oversleep"
    assert snap.node.id == "oversleep-1"
    assert snap.presentation.current_bgm_id is None
    assert interp.music_id == "audio-bgm-calm"
    while snap.status == "playing":
        snap = interp.advance()
    assert snap.node.id == "oversleep-3"
    assert audio.calls[-1] == ("stop",)

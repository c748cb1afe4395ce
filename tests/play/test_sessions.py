"""Tests for play sessions: reveal-then-advance, audio forwarding, autosave."""

from backend import sessions, storage


def _novel(make_novel):
    return make_novel({
        "a": [
            {"type": "audio", "audioId": "bgm-1", "action": "play"},
            {"type": "dialogue", "characterId": "alice", "text": "Hello"},
            {"type": "choice", "prompt": "Go?", "options": [
                {"id": "yes", "text": "Yes", "targetSceneId": "b"},
            ]},
        ],
        "b": [
            {"type": "audio", "audioId": "bgm-1", "action": "fade-out"},
            {"type": "narration", "text": "Done."},
        ],
    })


def _open(make_novel):
    storage.save_novel(_novel(make_novel))
    return sessions.open_session("novel-1")


# ── registry ────────────────────────────────────────────────


def test_open_missing_novel():
    assert sessions.open_session("nope") is None


def test_open_get_close(make_novel):
    session = _open(make_novel)
    assert sessions.get_session("novel-1") is session
    assert sessions.close_session("novel-1") is True
    assert sessions.get_session("novel-1") is None
    assert sessions.close_session("novel-1") is False


def test_session_uses_config(make_novel):
    storage.update_config({"chars_per_tick": 3, "text_speed_ms": 10})
    session = _open(make_novel)
    assert session.typewriter.chars_per_tick == 3
    assert session.typewriter.interval_ms == 10


# ── operations ──────────────────────────────────────────────


def test_start_view(make_novel):
    view = _open(make_novel).start()
    assert view["snapshot"]["status"] == "playing"
    assert view["snapshot"]["node"]["text"] == "Hello"
    assert view["text"] == {"displayed": "", "complete": False, "interval_ms": 30}
    assert view["audio"] == [
        {"action": "play_loop", "audio_id": "bgm-1", "duration_ms": None},
    ]
    assert view["stage"]["speaker"]["display_name"] == "Alice"
    assert view["has_save"] is False


def test_tick_reveals_text(make_novel):
    session = _open(make_novel)
    session.start()
    assert session.tick(2)["text"]["displayed"] == "He"
    view = session.tick(100)
    assert view["text"]["displayed"] == "Hello"
    assert view["text"]["complete"] is True


def test_advance_completes_reveal_first(make_novel):
    session = _open(make_novel)
    session.start()
    view = session.advance()
    assert view["snapshot"]["nodeIndex"] == 1
    assert view["text"] == {"displayed": "Hello", "complete": True, "interval_ms": 30}

    view = session.advance()
    assert view["snapshot"]["status"] == "choice"
    assert view["text"]["displayed"] == ""


def test_choose_moves_scene_and_forwards_fade(make_novel):
    session = _open(make_novel)
    session.start()
    session.advance()
    session.advance()
    view = session.choose("yes")
    assert view["snapshot"]["sceneId"] == "b"
    assert view["audio"] == [
        {"action": "fade_out", "audio_id": "bgm-1", "duration_ms": 1500},
    ]
    assert session.mixer.fading


def test_issues_reported_once(make_novel):
    session = _open(make_novel)
    session.start()
    view = session.choose("yes")
    assert [i["kind"] for i in view["snapshot"]["issues"]] == ["invalid_action"]
    assert session.view()["snapshot"]["issues"] == []


def test_save_and_load_through_files(make_novel):
    session = _open(make_novel)
    session.start()
    data = session.save()
    assert data.scene_id == "a"
    assert (storage.saves_dir() / "novel_save_novel-1.json").is_file()

    session.advance()
    session.advance()
    view = session.load()
    assert view["snapshot"]["nodeIndex"] == 1
    assert view["text"]["displayed"] == ""
    assert view["has_save"] is True


def test_autosave_on_choice(make_novel):
    storage.update_config({"autosave_on_choice": True})
    session = _open(make_novel)
    session.start()
    session.advance()
    session.advance()
    view = session.choose("yes")
    assert view["has_save"] is True
    assert session.slots.read("novel-1").scene_id == "b"


def test_no_autosave_by_default(make_novel):
    session = _open(make_novel)
    session.start()
    session.advance()
    session.advance()
    assert session.choose("yes")["has_save"] is False


def test_jump_to_same_node_restarts_reveal(make_novel):
    session = _open(make_novel)
    session.jump("b")
    session.advance()
    assert session.view()["text"]["complete"] is True

    view = session.jump("b")
    assert view["snapshot"]["nodeIndex"] == 1
    assert view["text"] == {"displayed": "", "complete": False, "interval_ms": 30}


def test_failed_choose_keeps_reveal(make_novel):
    session = _open(make_novel)
    session.start()
    session.tick(2)
    view = session.choose("nope")
    assert view["text"]["displayed"] == "He"

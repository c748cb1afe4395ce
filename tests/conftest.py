"""Shared content builders for playback tests."""

import pytest

from novella.models import Novel

CHARACTERS = [
    {"id": "alice", "name": "alice", "displayName": "Alice", "color": "340 82% 52%",
     "sprites": [{"id": "s1", "emotion": "neutral", "imageUrl": "alice-neutral.png"},
                 {"id": "s2", "emotion": "happy", "imageUrl": "alice-happy.png"}]},
    {"id": "bob", "name": "bob", "displayName": "Bob", "color": "210 90% 50%",
     "sprites": [{"id": "s3", "emotion": "neutral", "imageUrl": "bob.png"}]},
    {"id": "carol", "name": "carol", "displayName": "Carol", "sprites": []},
    {"id": "dave", "name": "dave", "displayName": "Dave", "sprites": []},
]

BACKGROUNDS = [
    {"id": "bg-1", "name": "Room", "imageUrl": "room.png"},
    {"id": "bg-2", "name": "Street", "imageUrl": ""},
]

AUDIO = [
    {"id": "bgm-1", "name": "Theme", "type": "bgm", "audioUrl": "theme.ogg"},
    {"id": "bgm-2", "name": "Battle", "type": "bgm", "audioUrl": "battle.ogg"},
    {"id": "sfx-knock", "name": "Knock", "type": "sfx", "audioUrl": "knock.ogg"},
]


def build_novel(scenes: dict[str, list[dict]], start: str | None = None, **fields) -> Novel:
    """Build a one-chapter novel. Nodes without an id get "<scene>-<index>"."""
    scene_list = []
    for scene_id, nodes in scenes.items():
        scene_list.append({
            "id": scene_id,
            "name": scene_id.upper(),
            "nodes": [{"id": f"{scene_id}-{i}", **node} for i, node in enumerate(nodes)],
        })
    data = {
        "id": "novel-1",
        "title": "Test Novel",
        "characters": CHARACTERS,
        "backgrounds": BACKGROUNDS,
        "audio": AUDIO,
        "chapters": [{"id": "ch-1", "title": "One", "scenes": scene_list}] if scene_list else [],
        "startSceneId": start if start is not None else next(iter(scenes), ""),
    }
    data.update(fields)
    return Novel.model_validate(data)


@pytest.fixture
def make_novel():
    return build_novel


class RecordingAudio:
    """AudioEngine that records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.loop_id: str | None = None

    def play_loop(self, audio_id: str) -> None:
        self.calls.append(("play_loop", audio_id))
        self.loop_id = audio_id

    def stop(self) -> None:
        self.calls.append(("stop",))
        self.loop_id = None

    def fade_out_and_stop(self, duration_ms: int) -> None:
        self.calls.append(("fade_out_and_stop", duration_ms))

    def play_one_shot(self, audio_id: str) -> None:
        self.calls.append(("play_one_shot", audio_id))

    def current_loop_id(self) -> str | None:
        return self.loop_id


@pytest.fixture
def audio():
    return RecordingAudio()

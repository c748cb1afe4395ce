from novella.assets import AssetResolver, describe_stage
from novella.interpreter import Interpreter
from novella.models import OnScreenCharacter, PresentationState, Snapshot


def test_resolver_urls(make_novel):
    resolver = AssetResolver(make_novel({"a": []}))
    assert resolver.background_url("bg-1") == "room.png"
    assert resolver.background_url("bg-2") is None  # empty url
    assert resolver.background_url("missing") is None
    assert resolver.background_url(None) is None
    assert resolver.audio_url("bgm-1") == "theme.ogg"
    assert resolver.audio_url("missing") is None


def test_sprite_fallbacks(make_novel):
    resolver = AssetResolver(make_novel({"a": []}))
    assert resolver.sprite_url("alice", "happy") == "alice-happy.png"
    assert resolver.sprite_url("alice") == "alice-neutral.png"
    assert resolver.sprite_url("alice", "furious") == "alice-neutral.png"
    assert resolver.sprite_url("carol") is None
    assert resolver.sprite_url("ghost") is None


def test_describe_stage(make_novel):
    novel = make_novel({"a": [
        {"type": "background", "backgroundId": "bg-1"},
        {"type": "character", "characterId": "bob", "action": "enter", "position": "right"},
        {"type": "dialogue", "characterId": "alice", "emotion": "happy", "text": "Hi"},
    ]})
    stage = describe_stage(Interpreter(novel).start(), novel)
    assert stage["background"] == {"background_id": "bg-1", "image_url": "room.png"}
    assert [c["character_id"] for c in stage["characters"]] == ["bob", "alice"]
    assert stage["characters"][1]["position"] == "center"
    assert stage["characters"][1]["sprite_url"] == "alice-happy.png"
    assert stage["speaker"] == {"character_id": "alice", "display_name": "Alice", "color": "340 82% 52%"}


def test_describe_stage_unknown_ids(make_novel):
    novel = make_novel({"a": []})
    snapshot = Snapshot(
        status="playing",
        node={"id": "n", "type": "dialogue", "characterId": "nobody", "text": "?"},
        presentation=PresentationState(
            on_screen_characters=[OnScreenCharacter(character_id="ghost")],
        ),
    )
    stage = describe_stage(snapshot, novel)
    assert stage["characters"][0]["display_name"] == "ghost"
    assert stage["characters"][0]["sprite_url"] is None
    assert stage["speaker"]["display_name"] == "???"
    assert stage["background"] == {"background_id": None, "image_url": None}


def test_narration_has_no_speaker(make_novel):
    novel = make_novel({"a": [{"type": "narration", "text": "Quiet."}]})
    assert describe_stage(Interpreter(novel).start(), novel)["speaker"] is None

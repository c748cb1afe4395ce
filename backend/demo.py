"""Create a demo novel for development/testing."""

from backend import storage
from novella.models import Novel
from novella.saves import save_key

DEMO_NOVEL_ID = "demo-morning"

DEMO_NOVEL = {
    "id": DEMO_NOVEL_ID,
    "title": "A Quiet Morning",
    "author": "Novella",
    "description": "A short demo of the player: backgrounds, characters, music and a choice.",
    "characters": [
        {
            "id": "char-alice",
            "name": "alice",
            "displayName": "Alice",
            "color": "340 82% 52%",
            "sprites": [
                {"id": "sprite-alice-neutral", "emotion": "neutral", "imageUrl": ""},
                {"id": "sprite-alice-happy", "emotion": "happy", "imageUrl": ""},
            ],
        },
        {
            "id": "char-bob",
            "name": "bob",
            "displayName": "Bob",
            "color": "210 90% 50%",
            "sprites": [{"id": "sprite-bob-neutral", "emotion": "neutral", "imageUrl": ""}],
        },
    ],
    "backgrounds": [
        {"id": "bg-bedroom", "name": "Bedroom", "imageUrl": ""},
        {"id": "bg-kitchen", "name": "Kitchen", "imageUrl": ""},
    ],
    "audio": [
        {"id": "audio-bgm-calm", "name": "Calm morning", "type": "bgm", "audioUrl": ""},
        {"id": "audio-bgm-cheerful", "name": "Breakfast", "type": "bgm", "audioUrl": ""},
        {"id": "audio-sfx-knock", "name": "Knock", "type": "sfx", "audioUrl": ""},
    ],
    "chapters": [
        {
            "id": "chapter-1",
            "title": "Chapter 1: Morning",
            "scenes": [
                {
                    "id": "scene-wake",
                    "name": "Waking up",
                    "nodes": [
                        {"id": "wake-bg", "type": "background", "backgroundId": "bg-bedroom", "transition": "fade"},
                        {"id": "wake-music", "type": "audio", "audioId": "audio-bgm-calm", "action": "play"},
                        {"id": "wake-alice", "type": "character", "characterId": "char-alice",
                         "action": "enter", "position": "center", "emotion": "neutral"},
                        {"id": "wake-1", "type": "narration",
                         "text": "The morning was bright. Alice woke to the sound of her alarm."},
                        {"id": "wake-2", "type": "dialogue", "characterId": "char-alice",
                         "emotion": "neutral", "text": "Morning already? I don't want to get up..."},
                        {"id": "wake-knock", "type": "audio", "audioId": "audio-sfx-knock", "action": "play"},
                        {"id": "wake-3", "type": "narration", "text": "Someone knocked on the door."},
                        {"id": "wake-bob", "type": "character", "characterId": "char-bob",
                         "action": "enter", "position": "right", "emotion": "neutral"},
                        {"id": "wake-alice-move", "type": "character", "characterId": "char-alice",
                         "action": "move", "position": "left"},
                        {"id": "wake-4", "type": "dialogue", "characterId": "char-bob",
                         "emotion": "neutral", "text": "Alice! Breakfast is ready. Coming?"},
                        {"id": "wake-choice", "type": "choice", "prompt": "What do you tell Bob?", "options": [
                            {"id": "opt-coming", "text": "Yes, I'm coming!", "targetSceneId": "scene-kitchen"},
                            {"id": "opt-sleep", "text": "No, five more minutes...", "targetSceneId": "scene-sleep"},
                        ]},
                    ],
                },
                {
                    "id": "scene-kitchen",
                    "name": "In the kitchen",
                    "nodes": [
                        {"id": "kitchen-bg", "type": "background", "backgroundId": "bg-kitchen", "transition": "fade"},
                        {"id": "kitchen-music", "type": "audio", "audioId": "audio-bgm-cheerful", "action": "play"},
                        {"id": "kitchen-alice", "type": "character", "characterId": "char-alice",
                         "action": "enter", "position": "left", "emotion": "happy"},
                        {"id": "kitchen-bob", "type": "character", "characterId": "char-bob",
                         "action": "enter", "position": "right", "emotion": "neutral"},
                        {"id": "kitchen-1", "type": "narration",
                         "text": "Alice dressed quickly and went down to the kitchen."},
                        {"id": "kitchen-2", "type": "dialogue", "characterId": "char-alice",
                         "emotion": "happy", "text": "Mmm, that smells great!"},
                        {"id": "kitchen-3", "type": "dialogue", "characterId": "char-bob",
                         "emotion": "neutral", "text": "I made your favourite pancakes."},
                        {"id": "kitchen-fade", "type": "audio", "audioId": "audio-bgm-cheerful", "action": "fade-out"},
                        {"id": "kitchen-4", "type": "narration", "text": "The day got off to a great start. The end."},
                    ],
                },
                {
                    "id": "scene-sleep",
                    "name": "Back to bed",
                    "nodes": [
                        {"id": "sleep-jump", "type": "jump", "targetSceneId": "scene-oversleep"},
                    ],
                },
                {
                    "id": "scene-oversleep",
                    "name": "Oversleeping",
                    "nodes": [
                        {"id": "oversleep-bg", "type": "background", "backgroundId": "bg-bedroom", "transition": "instant"},
                        {"id": "oversleep-1", "type": "narration", "text": "Alice pulled the blanket over her head."},
                        {"id": "oversleep-2", "type": "dialogue", "characterId": "char-alice",
                         "emotion": "neutral", "text": "Just five more minutes..."},
                        {"id": "oversleep-stop", "type": "audio", "audioId": "audio-bgm-calm", "action": "stop"},
                        {"id": "oversleep-3", "type": "narration", "text": "She slept until noon. The end."},
                    ],
                },
            ],
        },
    ],
    "startSceneId": "scene-wake",
}


def create_demo_data() -> Novel:
    """Write (or overwrite) the demo novel and clear its save slot."""
    novel = storage.save_novel(Novel.model_validate(DEMO_NOVEL))
    storage.FileSaveStore().remove(save_key(DEMO_NOVEL_ID))
    return novel

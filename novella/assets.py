"""Asset resolution and the render view of a snapshot.

Ids that do not resolve come back as None; the renderer shows its default
visual or plays nothing.
"""

from __future__ import annotations

from typing import Any

from novella.models import DialogueNode, Novel, Snapshot

DEFAULT_EMOTION = "neutral"


class AssetResolver:
    def __init__(self, novel: Novel) -> None:
        self._novel = novel

    def background_url(self, background_id: str | None) -> str | None:
        if background_id is None:
            return None
        background = self._novel.find_background(background_id)
        if background is None or not background.image_url:
            return None
        return background.image_url

    def audio_url(self, audio_id: str | None) -> str | None:
        if audio_id is None:
            return None
        asset = self._novel.find_audio(audio_id)
        if asset is None or not asset.audio_url:
            return None
        return asset.audio_url

    def sprite_url(self, character_id: str, emotion: str | None = None) -> str | None:
        """Sprite for the emotion (default "neutral"), else the first sprite."""
        character = self._novel.find_character(character_id)
        if character is None:
            return None
        sprite = character.sprite_for(emotion or DEFAULT_EMOTION)
        if sprite is None and character.sprites:
            sprite = character.sprites[0]
        if sprite is None or not sprite.image_url:
            return None
        return sprite.image_url


def describe_stage(snapshot: Snapshot, novel: Novel) -> dict[str, Any]:
    """Build the render view for a snapshot.

    Returns {"background": {...}, "characters": [...], "speaker": {...} | None}.
    Unknown characters keep their id as display name.
    """
    resolver = AssetResolver(novel)
    state = snapshot.presentation

    characters = []
    for entry in state.on_screen_characters:
        character = novel.find_character(entry.character_id)
        characters.append({
            "character_id": entry.character_id,
            "display_name": character.display_name if character else entry.character_id,
            "position": entry.position,
            "emotion": entry.emotion,
            "sprite_url": resolver.sprite_url(entry.character_id, entry.emotion),
        })

    speaker = None
    if isinstance(snapshot.node, DialogueNode):
        character = novel.find_character(snapshot.node.character_id)
        speaker = {
            "character_id": snapshot.node.character_id,
            "display_name": character.display_name if character else "???",
            "color": character.color if character else "",
        }

    return {
        "background": {
            "background_id": state.current_background_id,
            "image_url": resolver.background_url(state.current_background_id),
        },
        "characters": characters,
        "speaker": speaker,
    }

"""Presentation state reducer for director nodes.

    character   enter → upsert in place (never duplicated, never reordered)
                exit  → remove if present
                move  → update position (and emotion if given) if present;
                        never creates
    background  overwrite current_background_id
    audio       dispatch on the asset's stored type, not the node alone:
                  bgm  play → play_loop (no-op if already current)
                       stop → stop, fade-out → fade_out
                  sfx  play → play_one_shot; stop/fade-out ignored

Every function returns a new state and leaves its input untouched. Audio
effects come back as AudioCue values; the interpreter hands them to the
audio engine once the transition that produced them has committed.
"""

from __future__ import annotations

import logging

from novella.audio import AudioCue
from novella.models import (
    SPEAKER_POSITIONS,
    AudioNode,
    BackgroundNode,
    CharacterNode,
    Novel,
    OnScreenCharacter,
    PresentationState,
)

logger = logging.getLogger(__name__)


def apply_character(state: PresentationState, node: CharacterNode) -> PresentationState:
    existing = state.find_character(node.character_id)

    if node.action == "enter":
        entry = OnScreenCharacter(
            character_id=node.character_id,
            position=node.position or "center",
            emotion=node.emotion,
        )
        if existing is None:
            entries = [*state.on_screen_characters, entry]
        else:
            entries = [
                entry if e.character_id == node.character_id else e
                for e in state.on_screen_characters
            ]
        return state.model_copy(update={"on_screen_characters": entries})

    if existing is None:
        # exit/move of an absent character
        return state

    if node.action == "exit":
        entries = [e for e in state.on_screen_characters if e.character_id != node.character_id]
        return state.model_copy(update={"on_screen_characters": entries})

    moved = existing.model_copy(update={
        "position": node.position or existing.position,
        "emotion": node.emotion if node.emotion is not None else existing.emotion,
    })
    entries = [moved if e.character_id == node.character_id else e for e in state.on_screen_characters]
    return state.model_copy(update={"on_screen_characters": entries})


def apply_background(state: PresentationState, node: BackgroundNode) -> PresentationState:
    return state.model_copy(update={"current_background_id": node.background_id})


def apply_audio(
    state: PresentationState, node: AudioNode, novel: Novel
) -> tuple[PresentationState, list[AudioCue]]:
    asset = novel.find_audio(node.audio_id)
    if asset is None:
        return state, []

    if asset.type == "sfx":
        if node.action == "play":
            return state, [AudioCue(action="play_one_shot", audio_id=asset.id)]
        return state, []

    if node.action == "play":
        if state.current_bgm_id == asset.id:
            return state, []
        return (
            state.model_copy(update={"current_bgm_id": asset.id}),
            [AudioCue(action="play_loop", audio_id=asset.id)],
        )

    action = "stop" if node.action == "stop" else "fade_out"
    return (
        state.model_copy(update={"current_bgm_id": None}),
        [AudioCue(action=action, audio_id=asset.id)],
    )


def apply_directive(
    state: PresentationState,
    node: CharacterNode | BackgroundNode | AudioNode,
    novel: Novel,
) -> tuple[PresentationState, list[AudioCue]]:
    """Apply one director node. Returns (new_state, audio_cues)."""
    if isinstance(node, CharacterNode):
        return apply_character(state, node), []
    if isinstance(node, BackgroundNode):
        return apply_background(state, node), []
    if isinstance(node, AudioNode):
        return apply_audio(state, node, novel)
    raise TypeError(f"Not a director node: {node.type!r}")


def unresolved_reference(
    node: CharacterNode | BackgroundNode | AudioNode, novel: Novel
) -> str | None:
    """Describe the id a director node points at if it is missing from the novel."""
    if isinstance(node, CharacterNode) and novel.find_character(node.character_id) is None:
        return f"Character {node.character_id!r} not found (node {node.id})"
    if isinstance(node, BackgroundNode) and novel.find_background(node.background_id) is None:
        return f"Background {node.background_id!r} not found (node {node.id})"
    if isinstance(node, AudioNode) and novel.find_audio(node.audio_id) is None:
        return f"Audio {node.audio_id!r} not found (node {node.id})"
    return None


def enter_speaker(
    state: PresentationState, character_id: str, emotion: str | None = None
) -> PresentationState:
    """Put a dialogue speaker on stage if they are not there yet.

    Takes the first free position of center, left, right. When all three
    are occupied the speaker overlaps at center.
    """
    if state.find_character(character_id) is not None:
        return state
    occupied = state.occupied_positions()
    position = next((p for p in SPEAKER_POSITIONS if p not in occupied), "center")
    logger.debug("implicit enter character=%s position=%s", character_id, position)
    entry = OnScreenCharacter(character_id=character_id, position=position, emotion=emotion)
    return state.model_copy(update={"on_screen_characters": [*state.on_screen_characters, entry]})


def cleared() -> PresentationState:
    """State for a freshly entered scene: empty stage, no background, no bgm.

    Only the state resets. Music already playing keeps playing in the audio
    engine until a cue stops it.
    """
    return PresentationState()

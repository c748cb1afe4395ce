"""Core domain models.

The content model (Novel → Chapter → Scene → SceneNode) is loaded once and
treated as read-only by playback. PresentationState and Snapshot are derived
at runtime by the interpreter.

Field names are snake_case in Python and serialise to the camelCase names of
the content format (startSceneId, characterId, ...). Both spellings are
accepted on input. Pydantic is used for validation and serialisation at
every data boundary.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Position = Literal["left", "center", "right"]

NodeType = Literal[
    "dialogue",
    "narration",
    "choice",
    "background",
    "character",
    "audio",
    "jump",
]

INTERACTIVE_TYPES: frozenset[str] = frozenset({"dialogue", "narration", "choice"})
DIRECTOR_TYPES: frozenset[str] = frozenset({"background", "character", "audio"})

# Order in which an implicitly entering speaker looks for a free spot.
SPEAKER_POSITIONS: tuple[Position, ...] = ("center", "left", "right")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Assets
# ---------------------------------------------------------------------------

class CharacterSprite(CamelModel):
    id: str
    emotion: str  # free tag: "neutral", "happy", ...
    image_url: str = ""


class Character(CamelModel):
    id: str
    name: str
    display_name: str
    color: str = ""  # display only
    sprites: list[CharacterSprite] = Field(default_factory=list)

    def sprite_for(self, emotion: str) -> CharacterSprite | None:
        """First sprite tagged with emotion. Duplicate tags are allowed."""
        for sprite in self.sprites:
            if sprite.emotion == emotion:
                return sprite
        return None


class Background(CamelModel):
    id: str
    name: str
    image_url: str = ""


class AudioAsset(CamelModel):
    id: str
    name: str
    type: Literal["bgm", "sfx"]
    audio_url: str = ""


# ---------------------------------------------------------------------------
# Scene nodes (closed tagged union, discriminated on "type")
# ---------------------------------------------------------------------------

class DialogueNode(CamelModel):
    id: str
    type: Literal["dialogue"] = "dialogue"
    character_id: str
    emotion: str | None = None
    text: str


class NarrationNode(CamelModel):
    id: str
    type: Literal["narration"] = "narration"
    text: str


class ChoiceOption(CamelModel):
    id: str
    text: str
    target_scene_id: str
    condition: str | None = None  # reserved, never evaluated


class ChoiceNode(CamelModel):
    id: str
    type: Literal["choice"] = "choice"
    prompt: str | None = None
    options: list[ChoiceOption] = Field(default_factory=list)

    def find_option(self, option_id: str) -> ChoiceOption | None:
        for option in self.options:
            if option.id == option_id:
                return option
        return None


class BackgroundNode(CamelModel):
    id: str
    type: Literal["background"] = "background"
    background_id: str
    transition: Literal["fade", "instant", "dissolve"] | None = None


class CharacterNode(CamelModel):
    id: str
    type: Literal["character"] = "character"
    character_id: str
    action: Literal["enter", "exit", "move"]
    position: Position | None = None
    emotion: str | None = None


class AudioNode(CamelModel):
    id: str
    type: Literal["audio"] = "audio"
    audio_id: str
    action: Literal["play", "stop", "fade-out"]


class JumpNode(CamelModel):
    id: str
    type: Literal["jump"] = "jump"
    target_scene_id: str


SceneNode = Annotated[
    DialogueNode
    | NarrationNode
    | ChoiceNode
    | BackgroundNode
    | CharacterNode
    | AudioNode
    | JumpNode,
    Field(discriminator="type"),
]

InteractiveNode = DialogueNode | NarrationNode | ChoiceNode
DirectorNode = BackgroundNode | CharacterNode | AudioNode


def is_interactive(node: SceneNode) -> bool:
    """True for nodes that halt auto-advance (dialogue, narration, choice)."""
    return node.type in INTERACTIVE_TYPES


# ---------------------------------------------------------------------------
# Structure
# ---------------------------------------------------------------------------

class Scene(CamelModel):
    id: str
    name: str
    nodes: list[SceneNode] = Field(default_factory=list)


class Chapter(CamelModel):
    id: str
    title: str
    scenes: list[Scene] = Field(default_factory=list)


class Novel(CamelModel):
    """Root aggregate. Constructed wholesale by a loader."""

    id: str
    title: str
    author: str = ""
    description: str = ""
    cover_image_url: str | None = None
    characters: list[Character] = Field(default_factory=list)
    backgrounds: list[Background] = Field(default_factory=list)
    audio: list[AudioAsset] = Field(default_factory=list)
    chapters: list[Chapter] = Field(default_factory=list)
    start_scene_id: str = ""
    created_at: str | None = None
    updated_at: str | None = None

    def scenes(self) -> list[Scene]:
        return [scene for chapter in self.chapters for scene in chapter.scenes]

    def find_scene(self, scene_id: str) -> Scene | None:
        for scene in self.scenes():
            if scene.id == scene_id:
                return scene
        return None

    def find_character(self, character_id: str) -> Character | None:
        for character in self.characters:
            if character.id == character_id:
                return character
        return None

    def find_background(self, background_id: str) -> Background | None:
        for background in self.backgrounds:
            if background.id == background_id:
                return background
        return None

    def find_audio(self, audio_id: str) -> AudioAsset | None:
        for asset in self.audio:
            if asset.id == audio_id:
                return asset
        return None


# ---------------------------------------------------------------------------
# Runtime state
# ---------------------------------------------------------------------------

class OnScreenCharacter(CamelModel):
    character_id: str
    position: Position = "center"
    emotion: str | None = None


class PresentationState(CamelModel):
    """What is currently visible and audible.

    on_screen_characters holds at most one entry per character id, in
    order of first entrance.
    """

    on_screen_characters: list[OnScreenCharacter] = Field(default_factory=list)
    current_background_id: str | None = None
    current_bgm_id: str | None = None

    def find_character(self, character_id: str) -> OnScreenCharacter | None:
        for entry in self.on_screen_characters:
            if entry.character_id == character_id:
                return entry
        return None

    def occupied_positions(self) -> set[str]:
        return {entry.position for entry in self.on_screen_characters}


IssueKind = Literal[
    "reference_not_found",
    "empty_content",
    "malformed_save",
    "cyclic_entry_jump",
    "invalid_action",
    "no_save",
    "save_failed",
]

PlaybackStatus = Literal["idle", "playing", "choice", "ended"]


class PlaybackIssue(CamelModel):
    """A recoverable problem reported to the host instead of raised."""

    kind: IssueKind
    message: str


class Snapshot(CamelModel):
    """Render-ready view returned after every interpreter call.

    status:
      idle       playback never started (or could not start)
      playing    halted on dialogue/narration, waiting for advance()
      choice     halted on a choice, waiting for choose()
      ended      cursor on the last node, no forward transition left
    """

    status: PlaybackStatus
    scene_id: str | None = None
    scene_name: str | None = None
    node_index: int = 0
    node_count: int = 0
    node: SceneNode | None = None
    presentation: PresentationState = Field(default_factory=PresentationState)
    issues: list[PlaybackIssue] = Field(default_factory=list)

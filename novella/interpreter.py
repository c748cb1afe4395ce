"""Playback interpreter: the cursor state machine over a Novel.

State is (scene, node_index, PresentationState). node_index always points at
an interactive node (dialogue, narration, choice) or at the last node of the
scene when nothing interactive is left.

Scene entry (start, choose, jump, a jump node reached by advance):
  1. Reset PresentationState to empty. Music that is already playing keeps
     playing; music_id follows the track across scenes and is what save()
     records as currentBgmId.
  2. Entry lookahead: from index 0, apply consecutive director nodes
     (character, background, audio). A jump node ends the scan and enters its
     target the same way. Visited scenes are tracked per pass; revisiting
     one, or exceeding max_entry_jumps hops, is a CyclicEntryJump.
  3. Halt at the first interactive node. A dialogue whose speaker is not on
     stage gets an implicit enter (first free of center, left, right).

advance() runs the same scan starting after the current node. load()
restores a save verbatim and never re-runs lookahead.

Every operation is computed on a draft and committed only on success, so a
failed transition holds the last valid state. Audio cues produced while
scanning are dispatched after commit. Errors never escape the public
methods; they come back as PlaybackIssue entries on the Snapshot.
"""

from __future__ import annotations

import logging
from typing import Callable

from novella.audio import DEFAULT_FADE_OUT_MS, AudioCue, AudioEngine, dispatch_cues
from novella.errors import (
    CyclicEntryJump,
    EmptyContent,
    InvalidAction,
    MalformedSave,
    NoSave,
    PlaybackError,
    ReferenceNotFound,
    SaveFailed,
)
from novella.models import (
    ChoiceNode,
    DialogueNode,
    JumpNode,
    Novel,
    PlaybackIssue,
    PresentationState,
    Scene,
    SceneNode,
    Snapshot,
    is_interactive,
)
from novella.presentation import (
    apply_directive,
    cleared,
    enter_speaker,
    unresolved_reference,
)
from novella.saves import SaveData, SaveSlots

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRY_JUMPS = 32


class Interpreter:
    """Drives playback of one novel for one player.

    Args:
        novel:           The content to play. Never mutated.
        audio:           Engine that receives audio cues. Optional.
        saves:           Save-slot port used by save()/load(). Optional.
        novel_id:        Slot key; defaults to novel.id.
        fade_out_ms:     Duration passed to fade_out_and_stop().
        max_entry_jumps: Jumps one entry-lookahead pass may follow. A pass
                         enters at most max_entry_jumps + 1 scenes.
    """

    def __init__(
        self,
        novel: Novel,
        *,
        audio: AudioEngine | None = None,
        saves: SaveSlots | None = None,
        novel_id: str | None = None,
        fade_out_ms: int = DEFAULT_FADE_OUT_MS,
        max_entry_jumps: int = DEFAULT_MAX_ENTRY_JUMPS,
    ) -> None:
        self.novel = novel
        self._audio = audio
        self._saves = saves
        self._novel_id = novel_id or novel.id
        self._fade_out_ms = fade_out_ms
        self._max_entry_jumps = max_entry_jumps

        self._scene: Scene | None = None
        self._node_index = 0
        self._state = PresentationState()
        self._issues: list[PlaybackIssue] = []
        self._music_id: str | None = None
        self._transitions = 0

    # ------------------------------------------------------------------
    # Read-only view
    # ------------------------------------------------------------------

    @property
    def started(self) -> bool:
        return self._scene is not None

    @property
    def scene_id(self) -> str | None:
        return self._scene.id if self._scene else None

    @property
    def node_index(self) -> int:
        return self._node_index

    @property
    def presentation(self) -> PresentationState:
        return self._state.model_copy(deep=True)

    @property
    def current_node(self) -> SceneNode | None:
        if self._scene is None:
            return None
        return self._scene.nodes[self._node_index]

    @property
    def music_id(self) -> str | None:
        """Background music last started, kept across scene changes."""
        return self._music_id

    @property
    def transitions(self) -> int:
        """Count of committed cursor moves (entries, advances, loads)."""
        return self._transitions

    @property
    def last_issues(self) -> list[PlaybackIssue]:
        """Issues reported by the most recent public call."""
        return list(self._issues)

    def snapshot(self) -> Snapshot:
        presentation = self._state.model_copy(deep=True)
        issues = list(self._issues)
        if self._scene is None:
            return Snapshot(status="idle", presentation=presentation, issues=issues)

        node = self.current_node
        if isinstance(node, ChoiceNode):
            status = "choice"
        elif self._node_index >= len(self._scene.nodes) - 1:
            status = "ended"
        else:
            status = "playing"
        return Snapshot(
            status=status,
            scene_id=self._scene.id,
            scene_name=self._scene.name,
            node_index=self._node_index,
            node_count=len(self._scene.nodes),
            node=node if node is not None and is_interactive(node) else None,
            presentation=presentation,
            issues=issues,
        )

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def start(self) -> Snapshot:
        """Enter the novel's start scene from a blank state."""
        return self._run(self._start)

    def advance(self) -> Snapshot:
        """Move to the next interactive node, auto-applying directors.

        The caller is responsible for finishing any text reveal first.
        """
        return self._run(self._advance)

    def choose(self, option_id: str) -> Snapshot:
        return self._run(lambda: self._choose(option_id))

    def jump(self, target_scene_id: str) -> Snapshot:
        """Transfer to a scene, e.g. for an editor "preview from here"."""
        return self._run(lambda: self._transition(target_scene_id))

    def load(self, data: SaveData | None = None) -> Snapshot:
        """Restore a save verbatim. Reads the save slot when data is None."""
        return self._run(lambda: self._load(data))

    def save(self) -> SaveData | None:
        """Capture the current state (and write it to the save slot, if any).

        Returns None when playback has not started.
        """
        self._issues = []
        if self._scene is None:
            self._report(InvalidAction("Nothing to save: playback has not started"))
            return None
        data = SaveData.capture(
            self._scene.id, self._node_index, self._state, self._music_id
        )
        if self._saves is not None:
            try:
                self._saves.write(self._novel_id, data)
            except OSError as e:
                self._report(SaveFailed(f"Could not write save for novel {self._novel_id!r}: {e}"))
        return data

    # ------------------------------------------------------------------
    # Operation bodies (may raise PlaybackError)
    # ------------------------------------------------------------------

    def _run(self, operation: Callable[[], None]) -> Snapshot:
        self._issues = []
        try:
            operation()
        except PlaybackError as e:
            self._report(e)
        return self.snapshot()

    def _start(self) -> None:
        if not self.novel.scenes():
            raise EmptyContent(f"Novel {self.novel.id!r} has no chapters or scenes")
        if not self.novel.start_scene_id:
            raise ReferenceNotFound(f"Novel {self.novel.id!r} has no start scene")
        cues: list[AudioCue] = []
        if self._music_id is not None:
            cues.append(AudioCue(action="stop", audio_id=self._music_id))
        scene, index, state = self._enter(self.novel.start_scene_id, cues)
        self._commit(scene, index, state, cues)

    def _advance(self) -> None:
        if self._scene is None:
            raise InvalidAction("Playback has not started")
        if isinstance(self.current_node, ChoiceNode):
            raise InvalidAction("A choice is pending; call choose()")
        if self._node_index >= len(self._scene.nodes) - 1:
            return

        cues: list[AudioCue] = []
        index, state, target = self._scan(self._scene, self._node_index, self._state, cues)
        scene = self._scene
        if target is not None:
            logger.debug("jump from scene=%s to %s", scene.id, target)
            scene, index, state = self._enter(target, cues)
        self._commit(scene, index, state, cues)

    def _choose(self, option_id: str) -> None:
        node = self.current_node
        if not isinstance(node, ChoiceNode):
            raise InvalidAction("No choice is pending")
        option = node.find_option(option_id)
        if option is None:
            raise InvalidAction(f"Unknown option {option_id!r} for choice {node.id}")
        self._transition(option.target_scene_id)

    def _transition(self, target_scene_id: str) -> None:
        cues: list[AudioCue] = []
        scene, index, state = self._enter(target_scene_id, cues)
        self._commit(scene, index, state, cues)

    def _load(self, data: SaveData | None) -> None:
        if data is None:
            if self._saves is None:
                raise NoSave("No save storage configured")
            data = self._saves.read(self._novel_id)
            if data is None:
                raise NoSave(f"No save for novel {self._novel_id!r}")

        scene = self._require_scene(data.scene_id)
        if data.node_index >= len(scene.nodes):
            raise MalformedSave(
                f"Saved node index {data.node_index} is outside scene {scene.id!r}"
            )

        self._scene = scene
        self._node_index = data.node_index
        self._state = data.presentation()
        self._music_id = data.current_bgm_id
        self._transitions += 1
        logger.debug("loaded scene=%s index=%d", scene.id, data.node_index)

        if self._audio is not None:
            if data.current_bgm_id is not None:
                self._audio.play_loop(data.current_bgm_id)
            elif self._audio.current_loop_id() is not None:
                self._audio.stop()

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def _enter(
        self, scene_id: str, cues: list[AudioCue]
    ) -> tuple[Scene, int, PresentationState]:
        """Enter a scene and run entry lookahead, following entry jumps."""
        visited: list[str] = []
        while True:
            if scene_id in visited or len(visited) > self._max_entry_jumps:
                raise CyclicEntryJump([*visited, scene_id])
            visited.append(scene_id)
            scene = self._require_scene(scene_id)
            state = cleared()
            index, state, target = self._scan(scene, -1, state, cues)
            if target is None:
                logger.debug("entered scene=%s index=%d", scene.id, index)
                return scene, index, state
            scene_id = target

    def _scan(
        self,
        scene: Scene,
        index: int,
        state: PresentationState,
        cues: list[AudioCue],
    ) -> tuple[int, PresentationState, str | None]:
        """Walk forward from the node after index.

        Returns (index, state, jump_target). jump_target is set when a jump
        node was reached; index is then meaningless.
        """
        nodes = scene.nodes
        while index + 1 < len(nodes):
            node = nodes[index + 1]
            if isinstance(node, JumpNode):
                return index, state, node.target_scene_id
            index += 1
            if is_interactive(node):
                if isinstance(node, DialogueNode):
                    state = self._place_speaker(state, node)
                return index, state, None
            state = self._apply(state, node, cues)
        return index, state, None

    def _apply(self, state: PresentationState, node, cues: list[AudioCue]) -> PresentationState:
        missing = unresolved_reference(node, self.novel)
        if missing is not None:
            self._report(ReferenceNotFound(missing))
            return state
        state, new_cues = apply_directive(state, node, self.novel)
        cues.extend(new_cues)
        return state

    def _place_speaker(self, state: PresentationState, node: DialogueNode) -> PresentationState:
        if self.novel.find_character(node.character_id) is None:
            self._report(ReferenceNotFound(
                f"Speaker {node.character_id!r} not found (node {node.id})"
            ))
            return state
        return enter_speaker(state, node.character_id, node.emotion)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_scene(self, scene_id: str) -> Scene:
        scene = self.novel.find_scene(scene_id)
        if scene is None:
            raise ReferenceNotFound(f"Scene {scene_id!r} not found")
        if not scene.nodes:
            raise EmptyContent(f"Scene {scene.name!r} has no content")
        return scene

    def _commit(
        self, scene: Scene, index: int, state: PresentationState, cues: list[AudioCue]
    ) -> None:
        self._scene = scene
        self._node_index = index
        self._state = state
        self._transitions += 1
        cues = self._track_music(cues)
        if self._audio is not None:
            dispatch_cues(self._audio, cues, self._fade_out_ms)

    def _track_music(self, cues: list[AudioCue]) -> list[AudioCue]:
        """Follow the music the cues leave playing; drop replays of that track."""
        kept = []
        for cue in cues:
            if cue.action == "play_loop":
                if cue.audio_id == self._music_id:
                    continue
                self._music_id = cue.audio_id
            elif cue.action in ("stop", "fade_out"):
                self._music_id = None
            kept.append(cue)
        return kept

    def _report(self, error: PlaybackError) -> None:
        logger.warning("%s: %s", error.kind, error)
        self._issues.append(PlaybackIssue(kind=error.kind, message=str(error)))

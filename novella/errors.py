"""Playback error taxonomy.

Raised inside the core and caught at the public Interpreter methods, where
they become PlaybackIssue entries on the returned Snapshot.
"""

from __future__ import annotations


class PlaybackError(Exception):
    kind = "invalid_action"


class ReferenceNotFound(PlaybackError):
    """A scene, character, background or audio id does not resolve."""

    kind = "reference_not_found"


class EmptyContent(PlaybackError):
    """A scene has no nodes, or the novel has no chapters/scenes."""

    kind = "empty_content"


class MalformedSave(PlaybackError):
    kind = "malformed_save"


class CyclicEntryJump(PlaybackError):
    """Entry lookahead revisited a scene or ran past the hop limit."""

    kind = "cyclic_entry_jump"

    def __init__(self, chain: list[str]) -> None:
        self.chain = list(chain)
        super().__init__("Jump cycle at scene entry: " + " -> ".join(self.chain))


class InvalidAction(PlaybackError):
    kind = "invalid_action"


class NoSave(PlaybackError):
    kind = "no_save"


class SaveFailed(PlaybackError):
    """The save slot could not be written."""

    kind = "save_failed"

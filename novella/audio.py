"""Audio engine port and the in-memory mixer.

The interpreter never touches sound directly. The reducer emits AudioCue
values; dispatch_cues() maps them onto any object matching AudioEngine:

    play_loop(audio_id)           start/switch background music
    stop()                        stop music immediately
    fade_out_and_stop(duration)   stop music after a fade (fire-and-forget)
    play_one_shot(audio_id)       non-looping sound effect
    current_loop_id()             id of the music playing now, or None

AudioMixer is the implementation used by the backend. It keeps the loop
state, runs the fade as a delayed stop, and records every effect as an
AudioCue so the host can forward them to whatever actually makes noise.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Literal, Protocol

from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_FADE_OUT_MS = 1500

CueAction = Literal["play_loop", "stop", "fade_out", "play_one_shot"]


class AudioCue(BaseModel):
    action: CueAction
    audio_id: str | None = None
    duration_ms: int | None = None  # fade_out only


# ---------------------------------------------------------------------------
# Protocol: every audio engine must match these signatures
# ---------------------------------------------------------------------------

class AudioEngine(Protocol):
    def play_loop(self, audio_id: str) -> None: ...

    def stop(self) -> None: ...

    def fade_out_and_stop(self, duration_ms: int) -> None: ...

    def play_one_shot(self, audio_id: str) -> None: ...

    def current_loop_id(self) -> str | None: ...


def dispatch_cues(
    engine: AudioEngine, cues: list[AudioCue], fade_out_ms: int = DEFAULT_FADE_OUT_MS
) -> None:
    for cue in cues:
        if cue.action == "play_loop" and cue.audio_id:
            engine.play_loop(cue.audio_id)
        elif cue.action == "stop":
            engine.stop()
        elif cue.action == "fade_out":
            engine.fade_out_and_stop(cue.duration_ms or fade_out_ms)
        elif cue.action == "play_one_shot" and cue.audio_id:
            engine.play_one_shot(cue.audio_id)


# ---------------------------------------------------------------------------
# AudioMixer: in-memory engine
# ---------------------------------------------------------------------------

class _Timer(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], _Timer]


def _thread_timer(seconds: float, callback: Callable[[], None]) -> _Timer:
    timer = threading.Timer(seconds, callback)
    timer.daemon = True
    return timer


class AudioMixer:
    """Tracks the active loop and records effects for a client to play.

    A fade-out keeps the loop "current" until its timer fires. Any later
    play_loop() or stop() cancels the pending fade; the timer callback also
    re-checks a generation token so a superseded fade never clears a newer
    track.

    Args:
        timer_factory: Builds the fade timer from (seconds, callback).
                       Defaults to a daemon threading.Timer.
    """

    def __init__(self, timer_factory: TimerFactory | None = None) -> None:
        self._timer_factory = timer_factory or _thread_timer
        self._lock = threading.Lock()
        self._loop_id: str | None = None
        self._fade: _Timer | None = None
        self._generation = 0
        self._events: list[AudioCue] = []

    def current_loop_id(self) -> str | None:
        return self._loop_id

    @property
    def fading(self) -> bool:
        return self._fade is not None

    def play_loop(self, audio_id: str) -> None:
        with self._lock:
            was_fading = self._cancel_fade()
            if self._loop_id == audio_id and not was_fading:
                return
            self._loop_id = audio_id
            self._events.append(AudioCue(action="play_loop", audio_id=audio_id))

    def stop(self) -> None:
        with self._lock:
            self._cancel_fade()
            if self._loop_id is None:
                return
            self._loop_id = None
            self._events.append(AudioCue(action="stop"))

    def fade_out_and_stop(self, duration_ms: int = DEFAULT_FADE_OUT_MS) -> None:
        with self._lock:
            if self._loop_id is None:
                return
            self._cancel_fade()
            self._generation += 1
            token = self._generation
            fading_id = self._loop_id
            self._fade = self._timer_factory(
                duration_ms / 1000, lambda: self._finish_fade(token, fading_id)
            )
            self._events.append(
                AudioCue(action="fade_out", audio_id=fading_id, duration_ms=duration_ms)
            )
            self._fade.start()

    def play_one_shot(self, audio_id: str) -> None:
        with self._lock:
            self._events.append(AudioCue(action="play_one_shot", audio_id=audio_id))

    def drain_events(self) -> list[AudioCue]:
        """Return and forget the effects recorded since the last drain."""
        with self._lock:
            events, self._events = self._events, []
            return events

    def _cancel_fade(self) -> bool:
        if self._fade is None:
            return False
        self._fade.cancel()
        self._fade = None
        self._generation += 1
        return True

    def _finish_fade(self, token: int, fading_id: str) -> None:
        with self._lock:
            if token != self._generation or self._loop_id != fading_id:
                logger.debug("stale fade for %s ignored", fading_id)
                return
            self._fade = None
            self._loop_id = None

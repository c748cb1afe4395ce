"""Timed text reveal for dialogue and narration.

Knows nothing about nodes or scenes: it reveals a prefix of (text) that grows
by chars_per_tick on each tick(). The host drives tick() every interval_ms.
Once the whole text is visible the next tick marks it complete and fires
on_complete exactly once. skip_to_end() shows everything at once (without
on_complete). restart() with new text always resets to empty.
"""

from __future__ import annotations

from typing import Callable


class Typewriter:
    def __init__(
        self,
        text: str = "",
        chars_per_tick: int = 1,
        interval_ms: int = 30,
        on_complete: Callable[[], None] | None = None,
    ) -> None:
        if chars_per_tick < 1:
            raise ValueError("chars_per_tick must be at least 1")
        self.chars_per_tick = chars_per_tick
        self.interval_ms = interval_ms
        self.on_complete = on_complete
        self.restart(text)

    @property
    def text(self) -> str:
        return self._text

    @property
    def displayed_text(self) -> str:
        return self._text[: self._shown]

    @property
    def is_complete(self) -> bool:
        return self._complete

    def restart(self, text: str) -> None:
        self._text = text
        self._shown = 0
        self._complete = not text

    def tick(self) -> str:
        """Reveal the next chunk and return the visible prefix."""
        if self._complete:
            return self.displayed_text
        if self._shown < len(self._text):
            self._shown = min(len(self._text), self._shown + self.chars_per_tick)
        else:
            self._complete = True
            if self.on_complete is not None:
                self.on_complete()
        return self.displayed_text

    def skip_to_end(self) -> str:
        self._shown = len(self._text)
        self._complete = True
        return self._text

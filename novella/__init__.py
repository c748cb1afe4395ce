"""Visual novel playback core.

Content model, presentation reducer, interpreter, save codec, text reveal
and audio mixer. No web or filesystem dependencies.
"""

from novella.audio import AudioCue, AudioEngine, AudioMixer  # noqa: F401
from novella.interpreter import Interpreter  # noqa: F401
from novella.models import Novel, PresentationState, Snapshot  # noqa: F401
from novella.saves import MemorySaveStore, SaveData, SaveSlots, SaveStore  # noqa: F401
from novella.typewriter import Typewriter  # noqa: F401

"""File-based JSON storage for novels, saves and settings.

Data layout:
  data/
    novels/              One file per novel
      <id>.json          Full Novel in content format (camelCase keys)
    saves/               One save slot per novel
      novel_save_<id>.json  SaveData blob (see novella.saves)
    config.json          Player settings (text speed, fade, lookahead limit)

File names are slugified ids (see slugify()).

Config: get_config() returns defaults merged with stored values.
update_config() applies partial updates; unknown keys are ignored.
"""

# Re-export all public symbols so `from backend import storage` keeps working.

from .core import (  # noqa: F401
    data_dir,
    init_storage,
    novels_dir,
    saves_dir,
    slugify,
)

from .novels import (  # noqa: F401
    delete_novel,
    get_novel,
    list_novels,
    save_novel,
)

from .saves import (  # noqa: F401
    FileSaveStore,
)

from .config import (  # noqa: F401
    get_config,
    update_config,
)

"""Novel content storage: the content loader for playback.

Each novel is one JSON file (content-format camelCase) under novels/.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from novella.models import Novel

from .core import novels_dir, slugify

logger = logging.getLogger(__name__)


def _novel_path(novel_id: str) -> Path:
    return novels_dir() / f"{slugify(novel_id)}.json"


def list_novels() -> list[dict[str, Any]]:
    """Metadata of every readable novel (no chapters/assets)."""
    results = []
    for path in sorted(novels_dir().glob("*.json")):
        try:
            data = json.loads(path.read_text())
        except ValueError as e:
            logger.warning(f"Skipping unreadable novel file {path.name}: {e}")
            continue
        if not isinstance(data, dict):
            logger.warning(f"Skipping novel file {path.name}: not a JSON object")
            continue
        results.append({
            "id": data.get("id", path.stem),
            "title": data.get("title", ""),
            "author": data.get("author", ""),
            "description": data.get("description", ""),
            "scene_count": sum(len(ch.get("scenes", [])) for ch in data.get("chapters", [])),
            "updated_at": data.get("updatedAt"),
        })
    return results


def get_novel(novel_id: str) -> Novel | None:
    """Load a full novel. Returns None if missing or invalid."""
    path = _novel_path(novel_id)
    if not path.is_file():
        return None
    try:
        return Novel.model_validate_json(path.read_text())
    except ValidationError as e:
        logger.warning(f"Novel {novel_id} failed validation: {e.error_count()} error(s)")
        return None


def save_novel(novel: Novel) -> Novel:
    """Write a novel, stamping created_at/updated_at. Overwrites by id."""
    now = datetime.now(timezone.utc).isoformat()
    stamped = novel.model_copy(update={
        "created_at": novel.created_at or now,
        "updated_at": now,
    })
    _novel_path(novel.id).write_text(stamped.model_dump_json(by_alias=True, indent=2))
    return stamped


def delete_novel(novel_id: str) -> bool:
    path = _novel_path(novel_id)
    if not path.is_file():
        return False
    path.unlink()
    return True

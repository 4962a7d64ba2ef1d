"""
Snapshot store.

One JSON array per category under the output directory
(``<output_dir>/<collection>.json``), written with indent 2 and UTF-8.
Snapshots are the hand-off between an ingest run and a later
``load-existing`` run.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Sequence, Tuple

from pydantic import ValidationError

from geoingest.schemas.category import Category
from geoingest.schemas.entity import ENTITY_ADAPTER

from .errors import ConfigurationError, SnapshotError

logger = logging.getLogger(__name__)


def write_json(path: Path, obj: Any, *, encoding: str = "utf-8") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding=encoding) as f:
        json.dump(obj, f, indent=2, ensure_ascii=False)


class SnapshotStore:
    """Reads and writes per-category snapshot files."""

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)

    def path_for(self, category: Category) -> Path:
        return self.output_dir / category.snapshot_filename

    def ensure_writable(self) -> None:
        """
        Create the output directory and verify it accepts files.

        Raises:
            ConfigurationError: The directory cannot be created or written
        """
        probe = self.output_dir / ".write-probe"
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            probe.write_text("", encoding="utf-8")
            probe.unlink()
        except OSError as e:
            raise ConfigurationError(f"Output directory {self.output_dir} is not writable: {e}") from e

    def exists(self, category: Category) -> bool:
        return self.path_for(category).is_file()

    def write(self, category: Category, entities: Sequence[Any]) -> Path:
        path = self.path_for(category)
        try:
            write_json(path, [entity.model_dump(mode="json") for entity in entities])
        except OSError as e:
            raise SnapshotError(f"Could not write snapshot {path}: {e}") from e
        logger.info(f"Saved {len(entities)} items to {path}")
        return path

    def read(self, category: Category) -> Tuple[List[Any], int]:
        """
        Read a category snapshot.

        Returns:
            (entities, rejected) where rejected counts entries that no longer
            validate as a normalized entity

        Raises:
            SnapshotError: The file is missing, unreadable or not a JSON array
        """
        path = self.path_for(category)
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise SnapshotError(f"Could not read snapshot {path}: {e}") from e

        if not isinstance(data, list):
            raise SnapshotError(f"Snapshot {path} is not a JSON array")

        entities = []
        rejected = 0
        for idx, item in enumerate(data):
            try:
                entities.append(ENTITY_ADAPTER.validate_python(item))
            except ValidationError as e:
                rejected += 1
                logger.warning(f"{path.name}[{idx}] is invalid: {e.error_count()} errors")
        return entities, rejected

"""File-based task store adapter."""

import json
import logging
import os
from pathlib import Path

from tempo.core.tasks import Task, sort_by_start
from tempo.errors import FetchFailedError, InvalidDataError

from .memory_store import InMemoryTaskStore

logger = logging.getLogger(__name__)


class JsonTaskStore(InMemoryTaskStore):
    """
    File-based task store.

    Implements TaskStore protocol. All tasks live in one JSON file that is
    rewritten through a temp file and `os.replace`, so each write is atomic.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()
        super().__init__(self._load())

    def _load(self) -> list[Task]:
        """Read all tasks from disk. A missing file is an empty store."""
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise FetchFailedError(e) from e

        if not isinstance(data, dict) or not isinstance(data.get("tasks", []), list):
            raise InvalidDataError(f"{self.path} is not a task file")

        tasks = [Task.from_dict(item) for item in data.get("tasks", [])]
        logger.debug(f"Loaded {len(tasks)} task(s) from {self.path}")
        return tasks

    def _persist(self, tasks: dict[str, Task]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"tasks": [t.to_dict() for t in sort_by_start(list(tasks.values()))]}

        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        tmp_path.write_text(json.dumps(payload, indent=2))
        os.replace(tmp_path, self.path)

"""
Task data normalization for converting raw routine definitions to tasks.

Accepts durations as seconds or "MM:SS" strings, fills in missing ids, and
rejects anything a run could not be started with.
"""

import logging
import math
import uuid
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from ..errors import TaskDefinitionError
from ..state.models import Task

logger = logging.getLogger(__name__)


def parse_duration(value: Any) -> float:
    """
    Parse a duration given as seconds or as an "MM:SS" / "HH:MM:SS" string.

    Raises:
        ValueError: value is not a finite, non-negative duration
    """
    if isinstance(value, bool):
        raise ValueError(f"not a duration: {value!r}")

    if isinstance(value, str):
        text = value.strip()
        if ":" in text:
            parts = text.split(":")
            if len(parts) not in (2, 3) or not all(p.strip().isdigit() for p in parts):
                raise ValueError(f"not a duration: {value!r}")
            fields = [int(p) for p in parts]
            # only the leading field may exceed 59, as in "90:00"
            if any(f >= 60 for f in fields[1:]):
                raise ValueError(f"minute and second fields must be below 60: {value!r}")
            seconds = 0
            for field in fields:
                seconds = seconds * 60 + field
            return float(seconds)
        value = text

    seconds = float(value)
    if not math.isfinite(seconds) or seconds < 0:
        raise ValueError(f"duration must be finite and non-negative: {value!r}")
    return seconds


class TaskNormalizer:
    """
    Task definition normalization pipeline.

    Validates names and durations and makes ids unique within a routine.
    """

    def __init__(self, config: Optional[dict[str, Any]] = None):
        """
        Initialize task normalizer with configuration.

        Args:
            config: Normalization configuration dict. ``default_name`` is used
                for blank names when set; otherwise blank names are rejected.
        """
        self.config = config or {}
        self.logger = logger

    def normalize_task(self, raw: dict[str, Any], index: int = 0) -> Task:
        """
        Normalize a single raw task definition.

        Raises:
            TaskDefinitionError: definition is not usable
        """
        if not isinstance(raw, dict):
            raise TaskDefinitionError(
                f"tasks[{index}] must be a mapping", field=None, value=raw, index=index
            )

        name = raw.get("name")
        if name is None or not str(name).strip():
            default_name = self.config.get("default_name")
            if not default_name:
                raise TaskDefinitionError(
                    f"tasks[{index}] is missing a name", field="name", value=name, index=index
                )
            name = default_name

        if "duration" not in raw:
            raise TaskDefinitionError(
                f"tasks[{index}] is missing a duration", field="duration", index=index
            )
        try:
            duration = parse_duration(raw["duration"])
        except (ValueError, TypeError) as e:
            raise TaskDefinitionError(
                f"tasks[{index}] has an invalid duration: {e}",
                field="duration", value=raw["duration"], index=index
            ) from e

        task_id = raw.get("id")
        task_id = str(task_id) if task_id is not None else uuid.uuid4().hex

        return Task(id=task_id, name=str(name).strip(), planned_duration=duration)

    def normalize_tasks(self, raw_tasks: list[dict[str, Any]]) -> tuple[Task, ...]:
        """
        Normalize an ordered list of raw task definitions.

        Raises:
            TaskDefinitionError: any definition is invalid or an id repeats
        """
        if not isinstance(raw_tasks, list):
            raise TaskDefinitionError("tasks must be a list", value=raw_tasks)

        tasks = []
        seen_ids: set[str] = set()
        for index, raw in enumerate(raw_tasks):
            task = self.normalize_task(raw, index)
            if task.id in seen_ids:
                raise TaskDefinitionError(
                    f"tasks[{index}] repeats id {task.id!r}", field="id", value=task.id, index=index
                )
            seen_ids.add(task.id)
            tasks.append(task)

        self.logger.debug("Normalized %d tasks", len(tasks))
        return tuple(tasks)

    def load_routine_file(self, path: Union[str, Path]) -> tuple[Task, ...]:
        """
        Load a routine from a YAML file with a top-level ``tasks`` list.

        Raises:
            TaskDefinitionError: file content is not a routine
        """
        with open(path) as f:
            try:
                document = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise TaskDefinitionError(f"{path} is not valid YAML: {e}", value=str(path)) from e

        if not isinstance(document, dict) or "tasks" not in document:
            raise TaskDefinitionError(f"{path} has no top-level 'tasks' list", value=str(path))

        return self.normalize_tasks(document["tasks"])

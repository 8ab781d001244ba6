# src/todozen/tasks/task_models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any


def new_task_id() -> str:
    return str(uuid.uuid4())


@dataclass(slots=True)
class Task:
    description: str
    completed: bool = False
    id: str = field(default_factory=new_task_id)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "description": self.description, "completed": self.completed}

    @classmethod
    def from_dict(cls, raw: Any) -> Task:
        """
        Strict decode of one persisted task.

        Raises ValueError on any schema mismatch; the store treats that as a
        corrupt payload and starts empty.
        """
        if not isinstance(raw, dict):
            raise ValueError(f"task must be an object, got {type(raw).__name__}")

        task_id = raw.get("id")
        description = raw.get("description")
        completed = raw.get("completed")

        if not isinstance(task_id, str):
            raise ValueError("task id must be a string")
        # Validate only; the stored spelling (e.g. uppercase) is kept as written.
        uuid.UUID(task_id)
        if not isinstance(description, str):
            raise ValueError("task description must be a string")
        if not isinstance(completed, bool):
            raise ValueError("task completed must be a boolean")

        return cls(description=description, completed=completed, id=task_id)

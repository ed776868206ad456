from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional
from uuid import uuid4

from .errors import ProjectNotFoundError
from .models.project import ProjectSnapshot


logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def merge_changes(base: Mapping[str, Any], changes: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively overlay ``changes`` on ``base``.

    Nested mappings such as ``pricing`` or ``costs`` are merged key by key;
    lists and scalars in ``changes`` replace the stored value outright.
    """
    merged = dict(base)
    for key, value in changes.items():
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[key] = merge_changes(current, value)
        else:
            merged[key] = value
    return merged


class ProjectStore:
    """In-memory project snapshots keyed by id.

    ``get``/``update`` return ``None`` for unknown ids and ``delete`` returns
    ``False``; ``require`` and ``edit`` raise ``ProjectNotFoundError`` instead.
    """

    def __init__(self) -> None:
        self._projects: Dict[str, ProjectSnapshot] = {}
        self._lock = threading.RLock()

    def create(self, snapshot: ProjectSnapshot) -> ProjectSnapshot:
        now = _now()
        project = snapshot.model_copy(update={"id": str(uuid4()), "created_at": now, "updated_at": now})
        with self._lock:
            self._projects[project.id] = project
        logger.info("Created project %s", project.id)
        return project

    def get(self, project_id: str) -> Optional[ProjectSnapshot]:
        with self._lock:
            return self._projects.get(project_id)

    def require(self, project_id: str) -> ProjectSnapshot:
        project = self.get(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project

    def list_all(self) -> List[ProjectSnapshot]:
        with self._lock:
            return list(self._projects.values())

    def update(self, project_id: str, changes: Mapping[str, Any]) -> Optional[ProjectSnapshot]:
        """Merge ``changes`` over the stored snapshot; raises ``ValidationError`` on bad data."""
        with self._lock:
            existing = self._projects.get(project_id)
            if existing is None:
                return None
            merged = {**merge_changes(existing.model_dump(), changes), "id": project_id, "updated_at": _now()}
            project = ProjectSnapshot.model_validate(merged)
            self._projects[project_id] = project
        return project

    def edit(self, project_id: str, change: Callable[[ProjectSnapshot], ProjectSnapshot]) -> ProjectSnapshot:
        """Apply ``change`` as one read-modify-write cycle."""
        with self._lock:
            existing = self._projects.get(project_id)
            if existing is None:
                raise ProjectNotFoundError(project_id)
            project = change(existing).model_copy(update={"id": project_id, "created_at": existing.created_at, "updated_at": _now()})
            self._projects[project_id] = project
        return project

    def delete(self, project_id: str) -> bool:
        with self._lock:
            removed = self._projects.pop(project_id, None)
        if removed is not None:
            logger.info("Deleted project %s", project_id)
        return removed is not None

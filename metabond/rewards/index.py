"""
Active-week index over the project registry.

Caches, per queried week, the registry entries active that week. The cache
is dropped whenever the registry version changes, so results always match a
full scan in registry order.
"""

from typing import Dict, List, Tuple

from ..core.types import Project, Week
from ..registry import ProjectRegistry


class ActiveWeekIndex:

    def __init__(self, registry: ProjectRegistry) -> None:
        self.registry = registry
        self._version = registry.version
        self._by_week: Dict[Week, Tuple[Tuple[str, Project], ...]] = {}

    def active(self, week: Week) -> Tuple[Tuple[str, Project], ...]:
        """Return (project_id, project) pairs active in `week`, in registry order."""
        if self.registry.version != self._version:
            self._by_week.clear()
            self._version = self.registry.version

        cached = self._by_week.get(week)
        if cached is not None:
            return cached

        hits: List[Tuple[str, Project]] = [
            (project_id, project)
            for project_id, project in self.registry.iterate()
            if project.is_active(week)
        ]
        entry = tuple(hits)
        self._by_week[week] = entry
        return entry

    def __len__(self) -> int:
        return len(self._by_week)

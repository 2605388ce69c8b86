"""
Project registry contract and simple implementations.

The registry is owned by whoever creates and edits projects; the rewards
engine only reads it. Iteration order must be stable for a given version,
since reward results are reported in that order.
"""

import json
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Iterator, Optional, Tuple

from .core.types import Project


class ProjectRegistry(ABC):
    """Read-only view of the registered reward projects."""

    @abstractmethod
    def get(self, project_id: str) -> Optional[Project]:
        ...

    @abstractmethod
    def iterate(self) -> Iterator[Tuple[str, Project]]:
        """Yield (project_id, project) in stable order."""
        ...

    @property
    @abstractmethod
    def version(self) -> int:
        """Counter that changes whenever the registry contents change."""
        ...

    def __len__(self) -> int:
        return sum(1 for _ in self.iterate())


class InMemoryProjectRegistry(ProjectRegistry):
    """
    Insertion-ordered registry.

    Usage:
        registry = InMemoryProjectRegistry()
        registry.add(Project(id="alpha", reward_token="ALPHA-1a2b3c", ...))
    """

    def __init__(self, projects: Iterable[Project] = ()) -> None:
        self._projects: Dict[str, Project] = {}
        self._version = 0
        for project in projects:
            self.add(project)

    def add(self, project: Project) -> None:
        """
        Register a project.

        Raises:
            ValueError: If a project with the same id already exists
        """
        if project.id in self._projects:
            raise ValueError(f"Duplicate project id: {project.id}")
        self._projects[project.id] = project
        self._version += 1

    def get(self, project_id: str) -> Optional[Project]:
        return self._projects.get(project_id)

    def iterate(self) -> Iterator[Tuple[str, Project]]:
        for project_id, project in list(self._projects.items()):
            yield project_id, project

    @property
    def version(self) -> int:
        return self._version

    def __len__(self) -> int:
        return len(self._projects)

    def to_dict(self) -> Dict[str, list]:
        return {"projects": [p.to_dict() for _, p in self.iterate()]}


def load_registry(path: str) -> InMemoryProjectRegistry:
    """
    Load a registry from a JSON file.

    Format:
        {"projects": [{"id": ..., "reward_token": ..., "delegation_reward_supply": "...",
                       "lkmex_reward_supply": "...", "start_week": 1, "end_week": 4}, ...]}

    Order in the file is the registry iteration order.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If a project entry is malformed or duplicated
    """
    with open(path, "r") as f:
        data = json.load(f)

    projects = []
    for idx, entry in enumerate(data.get("projects", [])):
        try:
            projects.append(Project.from_dict(entry))
        except (KeyError, TypeError) as ex:
            raise ValueError(f"Malformed project entry #{idx} in {path}: {ex}") from ex
    return InMemoryProjectRegistry(projects)

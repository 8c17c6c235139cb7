from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence


@dataclass(frozen=True)
class Project:
    id: str
    user_id: str
    name: str
    color: str
    created_at: str
    updated_at: str
    description: str = ""
    # derived from tasks.project_id, never stored on the project row
    task_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class CreateProjectData:
    name: str
    color: str
    description: Optional[str] = None


@dataclass(frozen=True)
class UpdateProjectData:
    name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None


@dataclass(frozen=True)
class ProjectColor:
    name: str
    value: str


PROJECT_COLORS: tuple[ProjectColor, ...] = (
    ProjectColor("Berry Red", "#e01e5a"),
    ProjectColor("Orange", "#ff8000"),
    ProjectColor("Yellow", "#ffcc00"),
    ProjectColor("Olive Green", "#94c14f"),
    ProjectColor("Cyan Blue", "#00b8d9"),
    ProjectColor("Royal Blue", "#4c9aff"),
    ProjectColor("Purple", "#9e48cd"),
    ProjectColor("Magenta", "#fc0fc0"),
    ProjectColor("Gray", "#808080"),
    ProjectColor("Brown", "#8d6e63"),
)


def project_to_wire(project: Project) -> Dict[str, Any]:
    return {
        "id": project.id,
        "user_id": project.user_id,
        "name": project.name,
        "description": project.description,
        "color": project.color,
        "created_at": project.created_at,
        "updated_at": project.updated_at,
    }


def project_from_wire(row: Mapping[str, Any], task_ids: Sequence[str] = ()) -> Project:
    return Project(
        id=row["id"],
        user_id=row["user_id"],
        name=row["name"],
        description=row.get("description") or "",
        color=row["color"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        task_ids=tuple(task_ids),
    )

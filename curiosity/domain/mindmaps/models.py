from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence

# node and edge dicts are kept in the canvas' own JSON shape
Node = Dict[str, Any]
Edge = Dict[str, Any]


@dataclass(frozen=True)
class MindMap:
    id: str
    user_id: str
    name: str
    created_at: str
    updated_at: str
    description: str = ""
    nodes: tuple[Node, ...] = ()
    edges: tuple[Edge, ...] = ()


@dataclass(frozen=True)
class CreateMindMapData:
    name: str
    description: Optional[str] = None
    nodes: Sequence[Node] = ()
    edges: Sequence[Edge] = ()


@dataclass(frozen=True)
class UpdateMindMapData:
    name: Optional[str] = None
    description: Optional[str] = None
    nodes: Optional[Sequence[Node]] = None
    edges: Optional[Sequence[Edge]] = None


@dataclass(frozen=True)
class MindMapTemplate:
    id: str
    name: str
    description: str
    nodes: tuple[Node, ...]
    edges: tuple[Edge, ...]


def _node(node_id: str, x: int, y: int, label: str, kind: str, theme: str, energy: str, width: int,
          expanded: bool = False) -> Node:
    return {
        "id": node_id,
        "type": "custom",
        "position": {"x": x, "y": y},
        "data": {
            "label": label,
            "type": kind,
            "theme": theme,
            "energyLevel": energy,
            "isExpanded": expanded,
            "width": width,
        },
    }


def _edge(edge_id: str, source: str, target: str, animated: bool = False) -> Edge:
    edge: Edge = {"id": edge_id, "source": source, "target": target}
    if animated:
        edge["animated"] = True
    return edge


MINDMAP_TEMPLATES: tuple[MindMapTemplate, ...] = (
    MindMapTemplate(
        id="brainstorming",
        name="Brainstorming",
        description="Organize ideas around a central concept",
        nodes=(
            _node("central", 250, 200, "Central Idea", "THOUGHT", "PURPLE", "HIGH", 200, expanded=True),
            _node("idea1", 100, 100, "Idea 1", "IDEA", "BLUE", "MEDIUM", 150),
            _node("idea2", 400, 100, "Idea 2", "IDEA", "GREEN", "MEDIUM", 150),
            _node("idea3", 100, 300, "Idea 3", "IDEA", "AMBER", "MEDIUM", 150),
            _node("idea4", 400, 300, "Idea 4", "IDEA", "PINK", "MEDIUM", 150),
        ),
        edges=tuple(_edge(f"e-central-{n}", "central", f"idea{n}", animated=True) for n in range(1, 5)),
    ),
    MindMapTemplate(
        id="project-planning",
        name="Project Planning",
        description="Organize project tasks and milestones",
        nodes=(
            _node("project", 250, 100, "Project Name", "THOUGHT", "PURPLE", "HIGH", 200, expanded=True),
            _node("phase1", 100, 250, "Phase 1", "TASK", "BLUE", "MEDIUM", 150),
            _node("phase2", 400, 250, "Phase 2", "TASK", "BLUE", "MEDIUM", 150),
            _node("task1", 50, 400, "Task 1", "TASK", "GREEN", "LOW", 120),
            _node("task2", 150, 400, "Task 2", "TASK", "GREEN", "MEDIUM", 120),
            _node("task3", 350, 400, "Task 3", "TASK", "GREEN", "HIGH", 120),
            _node("task4", 450, 400, "Task 4", "TASK", "GREEN", "MEDIUM", 120),
        ),
        edges=(
            _edge("e-project-1", "project", "phase1", animated=True),
            _edge("e-project-2", "project", "phase2", animated=True),
            _edge("e-phase1-1", "phase1", "task1"),
            _edge("e-phase1-2", "phase1", "task2"),
            _edge("e-phase2-1", "phase2", "task3"),
            _edge("e-phase2-2", "phase2", "task4"),
        ),
    ),
    MindMapTemplate(
        id="problem-solving",
        name="Problem Solving",
        description="Analyze problems and find solutions",
        nodes=(
            _node("problem", 250, 100, "Problem Statement", "THOUGHT", "AMBER", "HIGH", 220, expanded=True),
            _node("cause1", 100, 250, "Cause 1", "THOUGHT", "PINK", "MEDIUM", 150),
            _node("cause2", 400, 250, "Cause 2", "THOUGHT", "PINK", "MEDIUM", 150),
            _node("solution1", 100, 400, "Solution 1", "IDEA", "GREEN", "HIGH", 150),
            _node("solution2", 400, 400, "Solution 2", "IDEA", "GREEN", "MEDIUM", 150),
        ),
        edges=(
            _edge("e-problem-1", "problem", "cause1"),
            _edge("e-problem-2", "problem", "cause2"),
            _edge("e-cause1-1", "cause1", "solution1"),
            _edge("e-cause2-1", "cause2", "solution2"),
        ),
    ),
)


def mindmap_to_wire(mind_map: MindMap) -> Dict[str, Any]:
    return {
        "id": mind_map.id,
        "user_id": mind_map.user_id,
        "name": mind_map.name,
        "description": mind_map.description,
        "nodes": list(mind_map.nodes),
        "edges": list(mind_map.edges),
        "created_at": mind_map.created_at,
        "updated_at": mind_map.updated_at,
    }


def mindmap_from_wire(row: Mapping[str, Any]) -> MindMap:
    return MindMap(
        id=row["id"],
        user_id=row["user_id"],
        name=row["name"],
        description=row.get("description") or "",
        nodes=tuple(row.get("nodes") or ()),
        edges=tuple(row.get("edges") or ()),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )

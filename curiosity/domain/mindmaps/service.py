# -*- coding: utf-8 -*-
"""Mind maps: canvas documents (nodes + edges) owned by one user."""
from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence

from curiosity.domain.common.errors import NotFoundError, ValidationError
from curiosity.domain.common.rules import validate_required_text
from curiosity.domain.common.service import EntityService, sparse
from curiosity.domain.mindmaps.models import (
    MINDMAP_TEMPLATES,
    CreateMindMapData,
    MindMap,
    MindMapTemplate,
    UpdateMindMapData,
    mindmap_from_wire,
)


def _validate_graph(field: str, items: Optional[Sequence[Mapping[str, Any]]]) -> None:
    if items is None:
        return
    ids = []
    for item in items:
        if not isinstance(item, Mapping) or not item.get("id"):
            raise ValidationError(f"every entry in {field} needs an id.")
        ids.append(item["id"])
    if len(set(ids)) != len(ids):
        raise ValidationError(f"{field} ids must be unique.")


def _validate_edges(nodes: Sequence[Mapping[str, Any]], edges: Sequence[Mapping[str, Any]]) -> None:
    known = {n["id"] for n in nodes}
    for edge in edges:
        if edge.get("source") not in known or edge.get("target") not in known:
            raise ValidationError(f"edge {edge['id']!r} must connect two nodes of the map.")


class MindMapService(EntityService):
    table = "mind_maps"

    async def list(self) -> List[MindMap]:
        session = await self._require_session("fetch mind maps")
        rows = await self._select(
            "fetching mind maps",
            self._owned(session).order("updated_at", ascending=False),
        )
        return [mindmap_from_wire(r) for r in rows]

    async def get(self, mind_map_id: str) -> MindMap:
        session = await self._require_session("fetch a mind map")
        row = await self._select_single("fetching mind map", self._owned(session, mind_map_id))
        return mindmap_from_wire(row)

    async def create(self, data: CreateMindMapData) -> MindMap:
        session = await self._require_session("save a mind map")
        validate_required_text("Mind map name", data.name, max_len=200)
        _validate_graph("nodes", data.nodes)
        _validate_graph("edges", data.edges)
        _validate_edges(data.nodes, data.edges)

        row = await self._insert_row(
            "saving mind map",
            {
                "user_id": session.user_id,
                "name": data.name.strip(),
                "description": data.description or "",
                "nodes": list(data.nodes),
                "edges": list(data.edges),
            },
        )
        return mindmap_from_wire(row)

    async def create_from_template(self, template_id: str, name: Optional[str] = None) -> MindMap:
        template = self.template(template_id)
        return await self.create(
            CreateMindMapData(
                name=name or template.name,
                description=template.description,
                nodes=template.nodes,
                edges=template.edges,
            )
        )

    async def update(self, mind_map_id: str, data: UpdateMindMapData) -> MindMap:
        session = await self._require_session("update a mind map")
        if data.name is not None:
            validate_required_text("Mind map name", data.name, max_len=200)
        _validate_graph("nodes", data.nodes)
        _validate_graph("edges", data.edges)
        if data.edges is not None:
            nodes = data.nodes
            if nodes is None:
                current = await self._select_single("fetching mind map", self._owned(session, mind_map_id))
                nodes = current["nodes"]
            _validate_edges(nodes, data.edges)
        elif data.nodes is not None:
            current = await self._select_single("fetching mind map", self._owned(session, mind_map_id))
            _validate_edges(data.nodes, current["edges"])

        values = sparse(
            {
                "name": data.name.strip() if data.name is not None else None,
                "description": data.description,
                "nodes": list(data.nodes) if data.nodes is not None else None,
                "edges": list(data.edges) if data.edges is not None else None,
            }
        )
        row = await self._update_owned("updating mind map", session, mind_map_id, values)
        return mindmap_from_wire(row)

    async def delete(self, mind_map_id: str) -> None:
        session = await self._require_session("delete a mind map")
        await self._delete_owned("deleting mind map", session, mind_map_id)

    @staticmethod
    def templates() -> tuple[MindMapTemplate, ...]:
        return MINDMAP_TEMPLATES

    @staticmethod
    def template(template_id: str) -> MindMapTemplate:
        for template in MINDMAP_TEMPLATES:
            if template.id == template_id:
                return template
        raise NotFoundError(f"no mind map template {template_id!r}")

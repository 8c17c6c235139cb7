"""
Mind maps: owner-scoped CRUD, JSON graph storage and the built-in templates.

Run with: python -m pytest tests/test_mindmaps.py -v
"""
from __future__ import annotations

import asyncio

import pytest

from curiosity.domain.common.errors import NotFoundError, UnauthenticatedError, ValidationError
from curiosity.domain.common.query import Query
from curiosity.domain.mindmaps.models import (
    CreateMindMapData,
    UpdateMindMapData,
    mindmap_from_wire,
    mindmap_to_wire,
)
from curiosity.domain.mindmaps.service import MindMapService

from helpers import Stack, run_with_stack

NODES = (
    {"id": "root", "type": "custom", "position": {"x": 0, "y": 0}, "data": {"label": "Root", "isExpanded": True}},
    {"id": "leaf", "type": "custom", "position": {"x": 120.5, "y": -40}, "data": {"label": "Leaf", "width": 150}},
)
EDGES = ({"id": "e1", "source": "root", "target": "leaf", "animated": True},)


def test_graph_survives_storage_as_json():
    async def run(stack: Stack):
        maps = stack.services.mindmaps
        created = await maps.create(CreateMindMapData(name="  Thesis  ", nodes=NODES, edges=EDGES))
        assert created.name == "Thesis"
        assert created.description == ""
        assert created.nodes == NODES
        assert created.edges == EDGES

        assert await maps.get(created.id) == created
        assert await maps.list() == [created]

        raw = await stack.db.fetchone("SELECT nodes, edges FROM mind_maps WHERE id = ?;", (created.id,))
        assert raw["nodes"].startswith("[")
        assert '"animated": true' in raw["edges"]

        # the backend hands JSON columns back decoded
        rows = await stack.backend.select(Query("mind_maps").eq("id", created.id))
        assert rows[0]["nodes"] == list(NODES)

    asyncio.run(run_with_stack(run))


def test_update_is_partial_and_list_is_most_recently_updated_first():
    async def run(stack: Stack):
        maps = stack.services.mindmaps
        first = await maps.create(CreateMindMapData(name="First", nodes=NODES, edges=EDGES))
        stack.clock.advance(minutes=1)
        second = await maps.create(CreateMindMapData(name="Second"))
        assert [m.id for m in await maps.list()] == [second.id, first.id]

        stack.clock.advance(minutes=1)
        renamed = await maps.update(first.id, UpdateMindMapData(name="First, revised"))
        assert renamed.nodes == NODES
        assert renamed.edges == EDGES
        assert renamed.updated_at > first.updated_at
        assert [m.id for m in await maps.list()] == [first.id, second.id]

        pruned = await maps.update(first.id, UpdateMindMapData(nodes=NODES[:1], edges=()))
        assert pruned.nodes == NODES[:1]
        assert pruned.edges == ()
        assert pruned.name == "First, revised"

        await maps.delete(second.id)
        assert [m.id for m in await maps.list()] == [first.id]

    asyncio.run(run_with_stack(run))


def test_graph_validation():
    async def run(stack: Stack):
        maps = stack.services.mindmaps
        with pytest.raises(ValidationError):
            await maps.create(CreateMindMapData(name="   "))
        with pytest.raises(ValidationError):
            await maps.create(CreateMindMapData(name="x", nodes=({"type": "custom"},)))
        with pytest.raises(ValidationError):
            await maps.create(CreateMindMapData(name="x", nodes=NODES + NODES[:1]))
        with pytest.raises(ValidationError):
            await maps.create(CreateMindMapData(name="x", nodes=NODES[:1], edges=EDGES))

        saved = await maps.create(CreateMindMapData(name="ok", nodes=NODES, edges=EDGES))
        # dropping a node that an existing edge still points at
        with pytest.raises(ValidationError):
            await maps.update(saved.id, UpdateMindMapData(nodes=NODES[:1]))
        with pytest.raises(ValidationError):
            await maps.update(saved.id, UpdateMindMapData(edges=({"id": "e2", "source": "root", "target": "gone"},)))
        assert await maps.get(saved.id) == saved

    asyncio.run(run_with_stack(run))


def test_maps_are_private_to_their_owner():
    async def run(stack: Stack):
        mine = await stack.services.mindmaps.create(CreateMindMapData(name="Mine"))
        other = stack.services_for("user-2").mindmaps

        assert await other.list() == []
        with pytest.raises(NotFoundError):
            await other.get(mine.id)
        with pytest.raises(NotFoundError):
            await other.update(mine.id, UpdateMindMapData(name="Taken"))
        await other.delete(mine.id)
        assert await stack.services.mindmaps.get(mine.id) == mine

        with pytest.raises(UnauthenticatedError):
            await stack.services_for(None).mindmaps.list()

    asyncio.run(run_with_stack(run))


def test_templates_are_connected_graphs():
    templates = MindMapService.templates()
    assert [t.id for t in templates] == ["brainstorming", "project-planning", "problem-solving"]
    for template in templates:
        ids = {n["id"] for n in template.nodes}
        assert len(ids) == len(template.nodes)
        for edge in template.edges:
            assert edge["source"] in ids and edge["target"] in ids

    brainstorming = MindMapService.template("brainstorming")
    assert brainstorming.nodes[0]["data"]["label"] == "Central Idea"
    assert all(e.get("animated") for e in brainstorming.edges)
    assert not any("animated" in e for e in MindMapService.template("problem-solving").edges)

    with pytest.raises(NotFoundError):
        MindMapService.template("kanban")


def test_create_from_template_copies_its_graph():
    async def run(stack: Stack):
        maps = stack.services.mindmaps
        plan = await maps.create_from_template("project-planning", name="Launch")
        template = MindMapService.template("project-planning")
        assert plan.name == "Launch"
        assert plan.description == template.description
        assert plan.nodes == template.nodes
        assert plan.edges == template.edges

        default_name = await maps.create_from_template("problem-solving")
        assert default_name.name == "Problem Solving"

    asyncio.run(run_with_stack(run))


def test_wire_round_trip():
    async def run(stack: Stack):
        created = await stack.services.mindmaps.create(CreateMindMapData(name="Wire", nodes=NODES, edges=EDGES))
        wire = mindmap_to_wire(created)
        assert wire["nodes"] == list(NODES)
        assert mindmap_from_wire(wire) == created

    asyncio.run(run_with_stack(run))

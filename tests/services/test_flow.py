"""
Tests for FlowService.
"""

import uuid

import pytest

from siteplan.core.exceptions import NotFoundError, ValidationError
from siteplan.database import FlowSave


def payload(nodes=("start", "pay"), edges=(("e1", "start", "pay"),), **edge_fields):
    return FlowSave(
        nodes=[
            {"id": node_id, "type": "shape", "position": {"x": i * 100, "y": 0}, "data": {"label": node_id}}
            for i, node_id in enumerate(nodes)
        ],
        edges=[{"id": edge_id, "source": source, "target": target, **edge_fields} for edge_id, source, target in edges],
    )


@pytest.fixture
def flow(site_items):
    return site_items["checkout"]


class TestFlowSave:
    """Tests for saving flow diagrams."""

    def test_save_and_read_back(self, services, flow):
        nodes, edges = services.flows.save(flow.id, payload())

        assert sorted(node.node_id for node in nodes) == ["pay", "start"]
        assert edges[0].source == "start"
        assert edges[0].target == "pay"

        stored = {node.node_id: node for node in services.flows.get_nodes(flow.id)}
        assert stored["pay"].position == {"x": 100, "y": 0}
        assert stored["pay"].data == {"label": "pay"}
        assert stored["pay"].type == "shape"
        assert len(services.flows.get_edges(flow.id)) == 1

    def test_save_replaces_previous_diagram(self, services, flow):
        services.flows.save(flow.id, payload())
        services.flows.save(flow.id, payload(nodes=("only",), edges=()))

        assert [node.node_id for node in services.flows.get_nodes(flow.id)] == ["only"]
        assert services.flows.get_edges(flow.id) == []

    def test_edges_animated_unless_disabled(self, services, flow):
        _, edges = services.flows.save(flow.id, payload())
        assert edges[0].animated is True

        _, edges = services.flows.save(flow.id, payload(animated=False))
        assert edges[0].animated is False

    def test_edge_to_unknown_node_rejected(self, services, flow):
        services.flows.save(flow.id, payload())

        with pytest.raises(ValidationError):
            services.flows.save(flow.id, payload(nodes=("a",), edges=(("e", "a", "ghost"),)))

        assert len(services.flows.get_nodes(flow.id)) == 2

    def test_duplicate_node_ids_rejected(self, services, flow):
        with pytest.raises(ValidationError):
            services.flows.save(flow.id, payload(nodes=("a", "a"), edges=()))

    def test_failed_save_keeps_previous_diagram(self, services, flow, mocker):
        services.flows.save(flow.id, payload())
        mocker.patch(
            "siteplan.database.repositories.flow.FlowEdgeRepository.create_many",
            side_effect=RuntimeError("disk full"),
        )

        with pytest.raises(RuntimeError):
            services.flows.save(flow.id, payload(nodes=("x", "y"), edges=(("e", "x", "y"),)))

        assert sorted(node.node_id for node in services.flows.get_nodes(flow.id)) == ["pay", "start"]
        assert len(services.flows.get_edges(flow.id)) == 1

    def test_item_must_be_a_flow(self, services, site_items):
        with pytest.raises(ValidationError):
            services.flows.save(site_items["home"].id, payload())
        with pytest.raises(ValidationError):
            services.flows.get_nodes(site_items["home"].id)

    def test_missing_flow(self, services):
        with pytest.raises(NotFoundError):
            services.flows.save(uuid.uuid4(), payload())
        with pytest.raises(NotFoundError):
            services.flows.get_edges(uuid.uuid4())

    def test_deleting_flow_item_removes_diagram(self, services, database, flow):
        services.flows.save(flow.id, payload())
        services.site_map.delete_item(flow.id)

        from siteplan.database import UnitOfWork

        with UnitOfWork(database) as uow:
            assert uow.flow_nodes.count() == 0
            assert uow.flow_edges.count() == 0

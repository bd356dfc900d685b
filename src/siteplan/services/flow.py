# services/flow.py
"""
Flow Service
============

Persistence of flow diagrams (nodes and edges) attached to ``flow`` site
items. A save replaces the whole diagram inside one transaction, so a
failure part-way leaves the previously saved diagram in place.
"""

from typing import List, Optional, Tuple
from uuid import UUID

from siteplan.core.exceptions import ValidationError
from siteplan.core.logger import get_logger
from siteplan.core.tree import SiteItemType
from siteplan.database import (
    FlowEdge,
    FlowEdgeCreate,
    FlowNode,
    FlowNodeCreate,
    FlowSave,
    SiteItem,
    UnitOfWork,
)

from .base import BaseService

logger = get_logger(__name__)


class FlowService(BaseService):
    """Service for flow diagrams."""

    def _get_flow(self, u: UnitOfWork, flow_id: UUID) -> SiteItem:
        item = u.site_items.get_or_raise(flow_id)
        if item.type != SiteItemType.FLOW:
            raise ValidationError(f"Site item {flow_id} is a {item.type.value}, not a flow")
        return item

    def get_nodes(self, flow_id: UUID, uow: Optional[UnitOfWork] = None) -> List[FlowNode]:
        with self._unit(uow) as u:
            self._get_flow(u, flow_id)
            return u.flow_nodes.get_by_flow(flow_id)

    def get_edges(self, flow_id: UUID, uow: Optional[UnitOfWork] = None) -> List[FlowEdge]:
        with self._unit(uow) as u:
            self._get_flow(u, flow_id)
            return u.flow_edges.get_by_flow(flow_id)

    def save(
        self,
        flow_id: UUID,
        payload: FlowSave,
        uow: Optional[UnitOfWork] = None,
    ) -> Tuple[List[FlowNode], List[FlowEdge]]:
        """
        Replace the nodes and edges of a flow.

        Args:
            flow_id: Site item id of the flow
            payload: Nodes and edges as sent by the diagram editor
            uow: Optional UnitOfWork for database transaction

        Returns:
            Tuple of (saved nodes, saved edges)

        Raises:
            NotFoundError: If the flow does not exist
            ValidationError: If the item is not a flow, node ids repeat, or an
                edge points at an unknown node
        """
        node_ids = [node.id for node in payload.nodes]
        if len(set(node_ids)) != len(node_ids):
            raise ValidationError("Flow node ids must be unique")
        edge_ids = [edge.id for edge in payload.edges]
        if len(set(edge_ids)) != len(edge_ids):
            raise ValidationError("Flow edge ids must be unique")
        known = set(node_ids)
        for edge in payload.edges:
            if edge.source not in known or edge.target not in known:
                raise ValidationError(f"Edge {edge.id} references an unknown node")

        with self._unit(uow) as u:
            self._get_flow(u, flow_id)

            removed_nodes = u.flow_nodes.delete_by_flow(flow_id)
            removed_edges = u.flow_edges.delete_by_flow(flow_id)

            nodes = u.flow_nodes.create_many(
                [
                    FlowNodeCreate(
                        flow_id=flow_id,
                        node_id=node.id,
                        type=node.type,
                        position=node.position,
                        data=node.data,
                        style=node.style,
                    )
                    for node in payload.nodes
                ]
            )
            edges = u.flow_edges.create_many(
                [
                    FlowEdgeCreate(
                        flow_id=flow_id,
                        edge_id=edge.id,
                        source=edge.source,
                        target=edge.target,
                        animated=edge.animated is not False,
                        style=edge.style,
                    )
                    for edge in payload.edges
                ]
            )

            logger.info(
                f"Saved flow {flow_id}: {len(nodes)} nodes, {len(edges)} edges "
                f"(replaced {removed_nodes} nodes, {removed_edges} edges)"
            )
            return nodes, edges

"""Flow node and edge repositories for database operations."""
from typing import List
from uuid import UUID

from sqlmodel import Session, SQLModel, select

from ..models import FlowEdge, FlowEdgeCreate, FlowNode, FlowNodeCreate
from ..repository import BaseRepository


class FlowNodeRepository(BaseRepository[FlowNode, FlowNodeCreate, SQLModel]):
    """Repository for FlowNode entities."""

    entity_name = "Flow node"

    def __init__(self, session: Session):
        super().__init__(FlowNode, session)

    def get_by_flow(self, flow_id: UUID) -> List[FlowNode]:
        """Get all nodes of a flow, in insertion order."""
        statement = (
            select(FlowNode)
            .where(FlowNode.flow_id == flow_id)
            .order_by(FlowNode.created_at)
        )
        return list(self.session.exec(statement).all())

    def delete_by_flow(self, flow_id: UUID) -> int:
        """Delete every node of a flow. Returns the number of rows removed."""
        rows = self.get_by_flow(flow_id)
        for row in rows:
            self.session.delete(row)
        self.session.flush()
        return len(rows)


class FlowEdgeRepository(BaseRepository[FlowEdge, FlowEdgeCreate, SQLModel]):
    """Repository for FlowEdge entities."""

    entity_name = "Flow edge"

    def __init__(self, session: Session):
        super().__init__(FlowEdge, session)

    def get_by_flow(self, flow_id: UUID) -> List[FlowEdge]:
        """Get all edges of a flow, in insertion order."""
        statement = (
            select(FlowEdge)
            .where(FlowEdge.flow_id == flow_id)
            .order_by(FlowEdge.created_at)
        )
        return list(self.session.exec(statement).all())

    def delete_by_flow(self, flow_id: UUID) -> int:
        """Delete every edge of a flow. Returns the number of rows removed."""
        rows = self.get_by_flow(flow_id)
        for row in rows:
            self.session.delete(row)
        self.session.flush()
        return len(rows)

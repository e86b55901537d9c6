"""
트리 레이아웃 출력 모델입니다.
프레젠테이션 셸은 이 모델(노드 위치 목록 + 간선 목록)만 사용하며,
내부 진행도 모델 구조에 직접 접근하지 않습니다.
"""

from typing import Optional
from pydantic import BaseModel, Field

from .common import NodeLevel, NodeStatus, Priority


class NodeFootprint(BaseModel):
    """레벨별 노드 크기."""
    width: float
    height: float


# 레벨이 내려갈수록 노드 크기가 작아집니다 (Product > Domain > Feature > Subtask).
DEFAULT_FOOTPRINTS = {
    NodeLevel.PRODUCT: NodeFootprint(width=220, height=110),
    NodeLevel.DOMAIN: NodeFootprint(width=200, height=100),
    NodeLevel.FEATURE: NodeFootprint(width=180, height=90),
    NodeLevel.SUBTASK: NodeFootprint(width=160, height=70),
}


class LayoutNode(BaseModel):
    """위치가 계산된 노드."""
    id: str
    level: NodeLevel
    name: str
    x: float = Field(..., description="노드 왼쪽 위 X 좌표")
    y: float = Field(..., description="노드 왼쪽 위 Y 좌표")
    width: float
    height: float
    completion: int
    status: Optional[NodeStatus] = None
    priority: Optional[Priority] = None
    expanded: bool = Field(False, description="하위 노드가 펼쳐져 있는지 여부")
    expandable: bool = Field(False, description="펼치기/접기 가능 여부 (Domain/Feature)")
    subtree_x: float = Field(..., description="서브트리 가로 영역 시작 X")
    subtree_width: float = Field(..., description="서브트리 가로 폭")


class LayoutEdge(BaseModel):
    """부모 → 자식 간선."""
    source_id: str
    target_id: str


class TreeLayout(BaseModel):
    """레이아웃 결과 전체."""
    nodes: list[LayoutNode] = Field(default_factory=list, description="전위 순회 순서의 노드 목록")
    edges: list[LayoutEdge] = Field(default_factory=list, description="간선 목록")
    width: float = Field(0, description="전체 트리 폭")
    depth: int = Field(0, description="보이는 가장 깊은 레벨 (Product=0)")

    def get_node(self, node_id: str, level: Optional[NodeLevel] = None) -> Optional[LayoutNode]:
        """ID(와 레벨)로 노드 조회. 레벨 간 ID가 겹칠 수 있으므로 레벨 지정을 권장합니다."""
        for node in self.nodes:
            if node.id == node_id and (level is None or node.level == level):
                return node
        return None

    def children_of(self, node_id: str) -> list[str]:
        """간선 기준 자식 ID 목록."""
        return [edge.target_id for edge in self.edges if edge.source_id == node_id]

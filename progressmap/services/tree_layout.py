"""
계층형 트리 레이아웃 엔진입니다.

진행도 모델, 펼쳐진 노드 ID 집합, 선택적 필터를 받아
위에서 아래로 내려가는 트리의 노드 좌표와 부모 → 자식 간선을 계산합니다.

레이아웃 전략:
- Product 노드가 맨 위, 그 아래 Domain → Feature → Subtask 순으로 한 레벨씩 내려감
- 레벨 간 세로 간격: VERTICAL_SPACING (140)
- 형제 서브트리 간 가로 간격: HORIZONTAL_SPACING (280)
- 각 노드는 자신의 서브트리 폭 위에서 가운데 정렬

서브트리 폭:
- 접혀 있거나 보이는 자식이 없으면 노드 자신의 폭
- 그 외에는 max(노드 폭, Σ 자식 서브트리 폭 + (자식 수 - 1) × HORIZONTAL_SPACING)

레이아웃은 (트리, 펼침 상태, 필터)에 대한 순수 함수이며 내부에 가변 상태를 두지 않습니다.
펼침 집합에 트리에 없는 ID가 있어도 오류가 아니며 무시됩니다.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from progressmap.models import (
    NodeLevel,
    NodeFootprint,
    DEFAULT_FOOTPRINTS,
    LEVEL_ORDER,
    ProgressFilter,
    LayoutNode,
    LayoutEdge,
    TreeLayout,
    status_for_completion,
)
from .progress_model import ProgressModel

logger = logging.getLogger(__name__)

HORIZONTAL_SPACING = 280
VERTICAL_SPACING = 140

# 펼치기/접기가 가능한 레벨
EXPANDABLE_LEVELS = {NodeLevel.DOMAIN, NodeLevel.FEATURE}


@dataclass
class _VisibleNode:
    """레이아웃 계산용 임시 노드."""
    level: NodeLevel
    entity: Any
    footprint: NodeFootprint
    expanded: bool
    children: list["_VisibleNode"] = field(default_factory=list)
    subtree_width: float = 0.0


class TreeLayoutEngine:
    """
    재귀 트리 레이아웃 계산기.

    Attributes:
        horizontal_spacing: 형제 서브트리 간 가로 간격
        vertical_spacing: 레벨 간 세로 간격
        footprints: 레벨별 노드 크기 (아래 레벨일수록 작아야 함)
    """

    def __init__(
        self,
        horizontal_spacing: float = HORIZONTAL_SPACING,
        vertical_spacing: float = VERTICAL_SPACING,
        footprints: Optional[dict[NodeLevel, NodeFootprint]] = None,
    ):
        if horizontal_spacing < 0 or vertical_spacing < 0:
            raise ValueError("레이아웃 간격은 음수일 수 없습니다")

        self.horizontal_spacing = float(horizontal_spacing)
        self.vertical_spacing = float(vertical_spacing)
        self.footprints = dict(footprints or DEFAULT_FOOTPRINTS)

        widths = [self.footprints[level].width for level in LEVEL_ORDER]
        heights = [self.footprints[level].height for level in LEVEL_ORDER]
        if any(a <= b for a, b in zip(widths, widths[1:])) or any(a <= b for a, b in zip(heights, heights[1:])):
            raise ValueError("노드 크기는 Product > Domain > Feature > Subtask 순으로 작아져야 합니다")

    @classmethod
    def from_settings(cls, settings) -> "TreeLayoutEngine":
        """설정값의 간격으로 엔진 생성."""
        return cls(
            horizontal_spacing=settings.horizontal_spacing,
            vertical_spacing=settings.vertical_spacing,
        )

    def layout(
        self,
        model: ProgressModel,
        expanded_ids: Iterable[str] = (),
        criteria: Optional[ProgressFilter] = None,
    ) -> TreeLayout:
        """
        노드 좌표와 간선 계산.

        Args:
            model: 진행도 모델
            expanded_ids: 펼쳐진 노드 ID (자신의 ID가 포함된 노드만 자식을 표시)
            criteria: 필터 조건 (None 또는 빈 필터는 전체 보기)

        Returns:
            TreeLayout: 전위 순회 순서의 노드 목록과 간선 목록
        """
        expanded = frozenset(expanded_ids)
        visible = None
        if criteria is not None and not criteria.is_empty:
            visible = model.query(criteria).visible_sets()

        root = self._build(model.snapshot(), NodeLevel.PRODUCT, expanded, visible)
        self._measure(root)

        nodes: list[LayoutNode] = []
        edges: list[LayoutEdge] = []
        self._place(root, 0.0, 0, nodes, edges)

        result = TreeLayout(
            nodes=nodes,
            edges=edges,
            width=root.subtree_width,
            depth=max(node.level.depth for node in nodes),
        )
        logger.debug(
            f"[TreeLayoutEngine] 레이아웃 계산 완료: 노드 {len(nodes)}개, "
            f"간선 {len(edges)}개, 폭 {result.width:.0f}"
        )
        return result

    # ==================== 내부 구현 ====================

    def _build(
        self,
        entity: Any,
        level: NodeLevel,
        expanded: frozenset,
        visible: Optional[dict[NodeLevel, set[str]]],
    ) -> _VisibleNode:
        """펼침 상태와 필터를 반영한 가시 트리 구성. 필터에서 빠진 노드는 아예 만들지 않습니다."""
        node = _VisibleNode(
            level=level,
            entity=entity,
            footprint=self.footprints[level],
            expanded=level != NodeLevel.SUBTASK and entity.id in expanded,
        )
        if not node.expanded:
            return node

        child_level, children = self._children_of(entity, level)
        for child in children:
            if visible is not None and child.id not in visible[child_level]:
                continue
            node.children.append(self._build(child, child_level, expanded, visible))
        return node

    @staticmethod
    def _children_of(entity: Any, level: NodeLevel) -> tuple[Optional[NodeLevel], list]:
        if level == NodeLevel.PRODUCT:
            return NodeLevel.DOMAIN, entity.domains
        if level == NodeLevel.DOMAIN:
            return NodeLevel.FEATURE, entity.features
        if level == NodeLevel.FEATURE:
            return NodeLevel.SUBTASK, entity.subtasks
        return None, []

    def _measure(self, node: _VisibleNode) -> float:
        """서브트리 폭 계산 (후위 순회)."""
        if not node.children:
            node.subtree_width = node.footprint.width
            return node.subtree_width

        children_width = sum(self._measure(child) for child in node.children)
        children_width += (len(node.children) - 1) * self.horizontal_spacing
        node.subtree_width = max(node.footprint.width, children_width)
        return node.subtree_width

    def _place(
        self,
        node: _VisibleNode,
        x: float,
        depth: int,
        nodes: list[LayoutNode],
        edges: list[LayoutEdge],
    ) -> None:
        """노드를 서브트리 위에 가운데 정렬하고 자식을 왼쪽부터 배치."""
        entity = node.entity
        width = node.footprint.width
        nodes.append(LayoutNode(
            id=entity.id,
            level=node.level,
            name=entity.name,
            x=x + (node.subtree_width - width) / 2,
            y=depth * self.vertical_spacing,
            width=width,
            height=node.footprint.height,
            completion=entity.completion,
            status=self._status_of(entity, node.level),
            priority=getattr(entity, "priority", None),
            expanded=node.expanded,
            expandable=node.level in EXPANDABLE_LEVELS,
            subtree_x=x,
            subtree_width=node.subtree_width,
        ))

        if not node.children:
            return

        # 노드가 자식 전체보다 넓으면 자식 묶음을 가운데로 옮겨 부모 중심과 맞춤
        children_width = sum(child.subtree_width for child in node.children)
        children_width += (len(node.children) - 1) * self.horizontal_spacing
        current_x = x + (node.subtree_width - children_width) / 2

        for child in node.children:
            edges.append(LayoutEdge(source_id=entity.id, target_id=child.entity.id))
            self._place(child, current_x, depth + 1, nodes, edges)
            current_x += child.subtree_width + self.horizontal_spacing

    @staticmethod
    def _status_of(entity: Any, level: NodeLevel):
        if level in (NodeLevel.FEATURE, NodeLevel.SUBTASK):
            return entity.status or status_for_completion(entity.completion)
        return None

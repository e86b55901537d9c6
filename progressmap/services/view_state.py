"""
펼침/필터 화면 상태 컨트롤러입니다.

프레젠테이션 셸이 보내는 사용자 의도(노드 토글, 필터 변경)를 새 상태로 바꾸고,
상태가 바뀔 때마다 레이아웃을 처음부터 다시 계산합니다 (부분 갱신 없음).
"""

import logging
from typing import Any, Mapping, Optional, Union

from progressmap.models import NodeLevel, ProgressFilter, TreeLayout
from .progress_model import ProgressModel
from .tree_layout import TreeLayoutEngine

logger = logging.getLogger(__name__)


class ViewStateController:
    """
    expanded_ids와 활성 필터를 소유하는 컨트롤러.

    - 토글은 Domain/Feature ID에만 적용됩니다. Product/Subtask/미존재 ID 토글은 아무 일도 하지 않습니다.
    - Product ID는 처음부터 펼침 집합에 들어 있어 Domain이 항상 보입니다.
    """

    def __init__(
        self,
        model: ProgressModel,
        engine: Optional[TreeLayoutEngine] = None,
        expanded_by_default: bool = False,
    ):
        self.model = model
        self.engine = engine or TreeLayoutEngine()
        self._expanded: set[str] = set()
        self._filter: Optional[ProgressFilter] = None
        self._layout: Optional[TreeLayout] = None

        if expanded_by_default:
            self.expand_all()
        else:
            self.collapse_all()

    @property
    def expanded_ids(self) -> frozenset:
        return frozenset(self._expanded)

    @property
    def active_filter(self) -> Optional[ProgressFilter]:
        return self._filter

    @property
    def layout(self) -> TreeLayout:
        """마지막으로 계산된 레이아웃."""
        if self._layout is None:
            return self.current_layout()
        return self._layout

    def toggle(self, node_id: str) -> TreeLayout:
        """
        노드 펼침 상태 반전.

        Returns:
            새로 계산한 레이아웃
        """
        if self._is_toggleable(node_id):
            if node_id in self._expanded:
                self._expanded.discard(node_id)
                logger.debug(f"[ViewState] 접기: {node_id}")
            else:
                self._expanded.add(node_id)
                logger.debug(f"[ViewState] 펼치기: {node_id}")
        else:
            logger.debug(f"[ViewState] 토글 대상이 아님 (무시): {node_id}")
        return self.current_layout()

    def set_filter(self, criteria: Union[ProgressFilter, Mapping[str, Any], None]) -> TreeLayout:
        """활성 필터 교체. None 또는 빈 필터는 '전체 보기'."""
        if criteria is not None and not isinstance(criteria, ProgressFilter):
            criteria = ProgressFilter.model_validate(criteria)
        self._filter = None if criteria is None or criteria.is_empty else criteria
        logger.debug(f"[ViewState] 필터 변경: {self._filter.model_dump() if self._filter else '전체 보기'}")
        return self.current_layout()

    def clear_filter(self) -> TreeLayout:
        return self.set_filter(None)

    def expand_all(self) -> TreeLayout:
        """제품과 모든 도메인/기능 펼치기."""
        product = self.model.snapshot()
        self._expanded = {product.id}
        for domain in product.domains:
            self._expanded.add(domain.id)
            for feature in domain.features:
                self._expanded.add(feature.id)
        return self.current_layout()

    def collapse_all(self) -> TreeLayout:
        """제품만 펼친 초기 상태로 되돌리기."""
        self._expanded = {self.model.snapshot().id}
        return self.current_layout()

    def current_layout(self) -> TreeLayout:
        """현재 모델과 화면 상태로 레이아웃을 다시 계산합니다."""
        self._layout = self.engine.layout(self.model, self._expanded, self._filter)
        return self._layout

    def _is_toggleable(self, node_id: str) -> bool:
        return (
            self.model.has_node(NodeLevel.DOMAIN, node_id)
            or self.model.has_node(NodeLevel.FEATURE, node_id)
        )

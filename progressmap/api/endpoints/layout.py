"""
트리 레이아웃 API입니다.
프레젠테이션 셸이 노드 펼치기/접기와 필터 변경을 요청하고,
계산된 노드 좌표와 간선을 받아가는 기능을 제공합니다.
"""

from fastapi import APIRouter

from progressmap.models import ProgressFilter, TreeLayout
from progressmap.services import ViewStateController, get_view_state

router = APIRouter()


def _view_response(view: ViewStateController, layout: TreeLayout) -> dict:
    """레이아웃과 현재 화면 상태를 함께 반환"""
    active = view.active_filter
    return {
        "layout": layout.model_dump(mode="json"),
        "expanded_ids": sorted(view.expanded_ids),
        "filter": active.model_dump(mode="json") if active else None,
    }


@router.get("")
async def get_layout() -> dict:
    """현재 모델과 화면 상태 기준 레이아웃 조회"""
    view = get_view_state()
    return _view_response(view, view.current_layout())


@router.post("/toggle/{node_id}")
async def toggle_node(node_id: str) -> dict:
    """
    노드 펼치기/접기.

    Domain/Feature만 토글됩니다. 그 외 ID는 무시하고 현재 레이아웃을 반환합니다.
    """
    view = get_view_state()
    return _view_response(view, view.toggle(node_id))


@router.put("/filter")
async def set_filter(criteria: ProgressFilter) -> dict:
    """활성 필터 교체 (빈 필터는 전체 보기)"""
    view = get_view_state()
    return _view_response(view, view.set_filter(criteria))


@router.delete("/filter")
async def clear_filter() -> dict:
    """필터 해제"""
    view = get_view_state()
    return _view_response(view, view.clear_filter())


@router.post("/expand-all")
async def expand_all() -> dict:
    """모든 도메인/기능 펼치기"""
    view = get_view_state()
    return _view_response(view, view.expand_all())


@router.post("/collapse-all")
async def collapse_all() -> dict:
    """제품만 펼친 상태로 접기"""
    view = get_view_state()
    return _view_response(view, view.collapse_all())

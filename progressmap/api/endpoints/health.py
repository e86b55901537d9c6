"""
헬스 체크(Health Check) 엔드포인트입니다.
서버가 살아서 정상적으로 응답하는지 확인하는 용도입니다.
"""

from fastapi import APIRouter

from progressmap.config import get_settings
from progressmap.services import get_progress_model

router = APIRouter()


@router.get("")
async def health_check():
    """
    기본 상태 확인 함수.
    서버가 켜져 있으면 {"status": "healthy"}를 반환합니다.
    """
    return {"status": "healthy"}


@router.get("/detail")
async def health_check_detail():
    """
    상세 상태 확인 함수.
    현재 레이아웃 설정과 불러온 제품 정보도 같이 보여줍니다.
    """
    settings = get_settings()
    model = get_progress_model()
    return {
        "status": "healthy",
        "config": {
            "horizontal_spacing": settings.horizontal_spacing,  # 형제 노드 가로 간격
            "vertical_spacing": settings.vertical_spacing,  # 레벨 간 세로 간격
            "expanded_by_default": settings.expanded_by_default,
            "default_priority_weights": settings.default_priority_weights,
        },
        "product": {
            "id": model.snapshot().id,
            "revision": model.revision,
        },
    }

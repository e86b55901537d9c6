"""
API 라우터 설정 파일입니다.
각 기능별로 나누어진 API 주소들을 하나로 모으는 역할을 합니다.
"""

from fastapi import APIRouter

from progressmap.api.endpoints import health, progress, layout

# 메인 API 라우터 생성
api_router = APIRouter()

# 헬스 체크 엔드포인트: 서버 상태 확인용 (/health)
api_router.include_router(
    health.router,
    prefix="/health",
    tags=["health"]
)

# 진행도 엔드포인트: 엔티티 갱신/삭제, 요약, 가중 점수, 필터 조회 (/progress)
api_router.include_router(
    progress.router,
    prefix="/progress",
    tags=["progress"]
)

# 레이아웃 엔드포인트: 펼치기/접기, 필터, 노드 좌표 조회 (/layout)
api_router.include_router(
    layout.router,
    prefix="/layout",
    tags=["layout"]
)

"""
제품 진행도 맵 서비스의 메인 진입점 파일입니다.
웹 서버 애플리케이션을 생성하고 설정하는 역할을 담당합니다.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from progressmap.config import get_settings
from progressmap.api.router import api_router
from progressmap.exceptions import ProgressMapError, NotFoundError
from progressmap.services import get_progress_model, get_view_state

# 로깅 설정
logging.basicConfig(
    level=getattr(logging, get_settings().log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    애플리케이션의 생명주기(시작과 종료)를 관리하는 함수입니다.

    서버가 시작될 때:
    1. 설정과 진행도 모델을 불러옵니다.
    2. 시작 로그를 출력합니다.

    서버가 종료될 때 종료 로그를 출력합니다.
    """
    settings = get_settings()
    model = get_progress_model()
    get_view_state()
    logger.info(f"진행도 맵이 다음 주소에서 시작됩니다: {settings.host}:{settings.port}")
    logger.info(f"불러온 제품: {model.snapshot().name} (revision {model.revision})")

    yield

    logger.info("진행도 맵이 종료됩니다")


def create_app() -> FastAPI:
    """
    FastAPI 웹 애플리케이션을 생성하고 설정하는 함수입니다.

    주요 기능:
    1. 기본 앱 정보 설정 (제목, 설명 등)
    2. CORS 설정 (프레젠테이션 셸과의 통신 허용 설정)
    3. API 라우터 연결 (기능별 주소 연결)
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="제품 → 도메인 → 기능 → 세부 작업 진행도 집계와 트리 레이아웃",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 글로벌 예외 핸들러: 커스텀 예외를 구조화된 JSON 응답으로 변환
    @app.exception_handler(ProgressMapError)
    async def progress_error_handler(request: Request, exc: ProgressMapError):
        status_code = 404 if isinstance(exc, NotFoundError) else 400
        return JSONResponse(
            status_code=status_code,
            content={
                "error_code": exc.error_code,
                "message": exc.message,
                "details": exc.details,
                "timestamp": datetime.now().isoformat(),
            },
        )

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception):
        logger.error(f"처리되지 않은 예외: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error_code": "ERR_INTERNAL",
                "message": "내부 서버 오류가 발생했습니다",
                "details": None,
                "timestamp": datetime.now().isoformat(),
            },
        )

    # API 라우터 포함: /api/v1 주소 아래에 모든 기능을 연결합니다.
    app.include_router(api_router, prefix="/api/v1")

    return app


# 애플리케이션 인스턴스 생성
app = create_app()


@app.get("/")
async def root():
    """
    루트 엔드포인트: 서버의 기본 정보를 반환합니다.
    """
    return {
        "name": get_settings().app_name,
        "version": "1.0.0",
        "description": "가중 진행도 집계와 트리 레이아웃 계산",
        "docs": "/docs",
        "api": "/api/v1",
    }


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "progressmap.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
    )

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """
    애플리케이션의 설정을 관리하는 클래스입니다.
    환경 변수(.env 파일)에서 설정값을 읽어옵니다.
    """

    app_name: str = "Product Progress Map"

    # 서버 설정: 서버가 실행될 주소와 포트 번호
    host: str = "0.0.0.0"  # 모든 외부 접속 허용
    port: int = 8000
    allowed_origins: list[str] = ["*"]
    log_level: str = "INFO"

    # 트리 레이아웃 설정: 형제 노드 간 가로 간격과 레벨 간 세로 간격
    horizontal_spacing: float = 280.0
    vertical_spacing: float = 140.0

    # 화면 상태 설정
    expanded_by_default: bool = False  # 시작 시 모든 도메인/기능을 펼칠지 결정
    load_sample_data: bool = True  # 시작 시 샘플 제품 구조를 불러올지 결정

    # 가중 점수 계산에 쓰는 우선순위별 기본 가중치
    default_priority_weights: dict[str, float] = {
        "CRITICAL": 1.5,
        "HIGH": 1.2,
        "MEDIUM": 1.0,
        "LOW": 0.5,
    }

    class Config:
        # 설정을 읽어올 파일 지정
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "PROGRESSMAP_"


@lru_cache()
def get_settings() -> Settings:
    """
    설정을 가져오는 함수입니다.
    @lru_cache를 사용하여 한 번 읽은 설정은 메모리에 저장해두고 재사용합니다.
    """
    return Settings()

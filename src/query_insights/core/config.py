"""애플리케이션 설정 모듈."""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """애플리케이션 설정."""

    # 프로젝트 컨텍스트 (advisor 캐시 키에 사용)
    project_ref: str = "default"

    # Index Advisor API 설정
    advisor_enabled: bool = True
    advisor_base_url: str = "http://localhost:8000/api/v1"
    advisor_api_key: Optional[str] = None
    advisor_timeout: float = 30.0
    advisor_max_concurrency: int = 8

    # 세션 범위 advisor 결과 캐시
    advisor_cache_maxsize: int = 512
    advisor_cache_ttl_seconds: float = 300.0

    # 분류 기준
    slow_query_threshold_ms: float = 300.0

    # SQL 파서 방언
    sql_dialect: str = "postgres"

    # 로그 레벨
    log_level: str = "INFO"

    model_config = {
        "env_prefix": "QUERY_INSIGHTS_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """설정 싱글톤 인스턴스를 반환한다."""
    return Settings()

"""쿼리 인사이트 및 SQL 평가 패키지."""

__version__ = "0.1.0"

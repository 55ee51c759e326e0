"""로깅 설정."""

import hashlib
import logging

LOGGER_NAME = "query_insights"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str | int = logging.INFO) -> logging.Logger:
    """패키지 로거에 콘솔 핸들러를 설정한다.

    여러 번 호출해도 핸들러가 중복 추가되지 않는다.

    Args:
        level: 로그 레벨 (이름 또는 숫자)

    Returns:
        설정된 패키지 로거
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if not logger.handlers:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(console)

    return logger


def summarize_sql(sql: str) -> dict[str, int | str]:
    """로그 출력용 SQL 요약 (원문 대신 길이와 해시만 남긴다)."""
    sql_hash = hashlib.sha256(sql.encode("utf-8")).hexdigest()[:8]
    return {"len": len(sql), "sha256_8": sql_hash}

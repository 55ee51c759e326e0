"""로깅 설정 테스트."""

import logging

from query_insights.core.logging import LOGGER_NAME, setup_logging, summarize_sql


class TestSetupLogging:
    """setup_logging 테스트."""

    def test_should_configure_package_logger(self) -> None:
        """패키지 로거의 레벨을 설정해야 함."""
        # When
        logger = setup_logging("DEBUG")

        # Then
        assert logger.name == LOGGER_NAME
        assert logger.level == logging.DEBUG

    def test_should_not_duplicate_handlers(self) -> None:
        """여러 번 호출해도 핸들러가 중복되지 않아야 함."""
        # When
        setup_logging()
        logger = setup_logging()

        # Then
        assert len(logger.handlers) == 1


class TestSummarizeSql:
    """summarize_sql 테스트."""

    def test_should_not_include_sql_text(self) -> None:
        """요약에는 원문 SQL이 포함되지 않아야 함."""
        # Given
        sql = "SELECT password FROM users"

        # When
        summary = summarize_sql(sql)

        # Then
        assert summary["len"] == len(sql)
        assert len(summary["sha256_8"]) == 8
        assert "password" not in str(summary)

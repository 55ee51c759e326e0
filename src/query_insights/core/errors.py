"""예외 정의."""


class QueryInsightsError(Exception):
    """패키지 공통 예외."""

    pass


class InvalidStatRowError(QueryInsightsError, ValueError):
    """통계 row 형식이 올바르지 않을 때 발생."""

    pass


class AdvisorRequestError(QueryInsightsError):
    """Index Advisor 요청 실패 (전송 계층 에러)."""

    pass


class SqlParseError(QueryInsightsError):
    """SQL 파싱 실패."""

    pass

"""Core 데이터 모델 정의."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from query_insights.core.errors import InvalidStatRowError


class IssueType(Enum):
    """쿼리 이슈 유형 (이슈 없음은 None으로 표현)."""

    ERROR = "error"
    INDEX = "index"
    SLOW = "slow"


class HealthLevel(Enum):
    """전체 쿼리 건강도 등급."""

    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass
class AdvisorResult:
    """Index Advisor 분석 결과."""

    errors: list[str] = field(default_factory=list)
    index_statements: list[str] = field(default_factory=list)
    startup_cost_before: float = 0.0
    startup_cost_after: float = 0.0
    total_cost_before: float = 0.0
    total_cost_after: float = 0.0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AdvisorResult":
        """API 응답 딕셔너리에서 결과를 생성한다.

        Args:
            data: advisor 응답 (errors, index_statements, 비용 필드)

        Returns:
            AdvisorResult 인스턴스
        """
        return cls(
            errors=[str(e) for e in data.get("errors") or []],
            index_statements=[str(s) for s in data.get("index_statements") or []],
            startup_cost_before=float(data.get("startup_cost_before") or 0),
            startup_cost_after=float(data.get("startup_cost_after") or 0),
            total_cost_before=float(data.get("total_cost_before") or 0),
            total_cost_after=float(data.get("total_cost_after") or 0),
        )


# 통계 row의 숫자 필드 목록 (입력 키 -> 속성명)
_NUMERIC_FIELDS = {
    "calls": "calls",
    "mean_time": "mean_time",
    "min_time": "min_time",
    "max_time": "max_time",
    "total_time": "total_time",
    "prop_total_time": "prop_total_time",
    "rows_read": "rows_read",
    "cache_hit_rate": "cache_hit_rate",
    "_total_cache_hits": "total_cache_hits",
    "_total_cache_misses": "total_cache_misses",
}


@dataclass
class StatRow:
    """pg_stat_statements 기반 쿼리 통계 row."""

    query: str
    calls: int = 0
    mean_time: float = 0.0
    min_time: float = 0.0
    max_time: float = 0.0
    total_time: float = 0.0
    prop_total_time: float = 0.0
    rows_read: int = 0
    cache_hit_rate: float = 0.0
    rolname: str = ""
    application_name: str = ""
    index_advisor_result: Optional[AdvisorResult] = None
    total_cache_hits: int = 0
    total_cache_misses: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StatRow":
        """통계 서비스의 row 딕셔너리에서 StatRow를 생성한다.

        Args:
            data: 역직렬화된 통계 row

        Returns:
            StatRow 인스턴스

        Raises:
            InvalidStatRowError: query가 없거나 숫자 필드 형식이 잘못된 경우
        """
        query = data.get("query")
        if not isinstance(query, str) or not query.strip():
            raise InvalidStatRowError(f"query 텍스트가 없는 통계 row입니다: {data!r}")

        values: dict[str, Any] = {}
        for key, attr in _NUMERIC_FIELDS.items():
            raw = data.get(key)
            if raw is None:
                continue
            if isinstance(raw, bool) or not isinstance(raw, (int, float)):
                raise InvalidStatRowError(
                    f"숫자 필드 '{key}'의 값이 올바르지 않습니다: {raw!r}"
                )
            values[attr] = raw

        advisor = data.get("index_advisor_result")
        if advisor is not None and not isinstance(advisor, dict):
            raise InvalidStatRowError(
                f"index_advisor_result 형식이 올바르지 않습니다: {advisor!r}"
            )

        return cls(
            query=query,
            rolname=data.get("rolname") or "",
            application_name=data.get("application_name") or "",
            index_advisor_result=(
                AdvisorResult.from_dict(advisor) if advisor is not None else None
            ),
            **values,
        )


@dataclass
class Classification:
    """단일 row 분류 결과."""

    issue_type: Optional[IssueType]
    hint: str = ""


@dataclass
class ClassifiedQuery:
    """분류가 붙은 통계 row."""

    row: StatRow
    issue_type: Optional[IssueType]
    hint: str
    query_type: Optional[str] = None


@dataclass(frozen=True)
class QuotingFinding:
    """식별자 quoting 검사 결과."""

    identifier: str
    requires_quoting: bool
    is_quoted: bool


@dataclass
class SyntaxReport:
    """SQL 배치 문법 검증 결과."""

    valid_ratio: float
    errors: list[str] = field(default_factory=list)
    total: int = 0
    valid: int = 0


@dataclass
class ScoreResult:
    """평가 scorer 결과."""

    name: str
    score: float
    metadata: Optional[dict[str, Any]] = None

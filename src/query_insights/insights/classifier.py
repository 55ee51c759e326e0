"""쿼리 통계 row 분류기."""

import re
from dataclasses import dataclass, field
from typing import Optional

from query_insights.core.models import (
    AdvisorResult,
    Classification,
    ClassifiedQuery,
    IssueType,
    StatRow,
)

# 평균 실행 시간 임계값 (밀리초, 초과 시 느린 쿼리)
SLOW_QUERY_THRESHOLD_MS = 300

SLOW_QUERY_HINT = "Abnormally slow query detected"

# 선행 주석 / 괄호를 건너뛴 첫 키워드
QUERY_TYPE_PATTERN = re.compile(
    r"^(?:\s|--[^\n]*\n|/\*.*?\*/|\()*([a-zA-Z]+)", re.DOTALL
)


def has_index_recommendations(result: Optional[AdvisorResult]) -> bool:
    """advisor 결과가 유효한 인덱스 추천을 담고 있는지 확인한다."""
    if result is None:
        return False
    return not result.errors and len(result.index_statements) > 0


def classify_query(
    row: StatRow, slow_threshold_ms: float = SLOW_QUERY_THRESHOLD_MS
) -> Classification:
    """통계 row 하나를 이슈 유형으로 분류한다.

    우선순위: advisor 에러 > 인덱스 추천 > 느린 쿼리 > 이슈 없음.

    Args:
        row: 분류할 통계 row
        slow_threshold_ms: 느린 쿼리 판정 임계값 (초과 시 SLOW)

    Returns:
        분류 결과
    """
    result = row.index_advisor_result

    # advisor 자체가 보고한 에러가 최우선
    if result is not None and result.errors:
        return Classification(IssueType.ERROR, result.errors[0])

    if has_index_recommendations(result):
        return Classification(
            IssueType.INDEX, f"Missing index: {result.index_statements[0]}"
        )

    if row.mean_time > slow_threshold_ms:
        return Classification(IssueType.SLOW, SLOW_QUERY_HINT)

    return Classification(None, "")


def get_query_type(query: str) -> Optional[str]:
    """쿼리의 첫 키워드를 대문자로 반환한다 (없으면 None)."""
    match = QUERY_TYPE_PATTERN.match(query)
    if not match:
        return None
    return match.group(1).upper()


@dataclass
class QueryInsightsIssues:
    """분류된 row와 이슈 유형별 그룹."""

    classified: list[ClassifiedQuery] = field(default_factory=list)
    errors: list[ClassifiedQuery] = field(default_factory=list)
    index_issues: list[ClassifiedQuery] = field(default_factory=list)
    slow_queries: list[ClassifiedQuery] = field(default_factory=list)


def classify_rows(
    rows: list[StatRow], slow_threshold_ms: float = SLOW_QUERY_THRESHOLD_MS
) -> QueryInsightsIssues:
    """row 목록을 분류하고 이슈 유형별로 묶는다.

    Args:
        rows: 통계 row 목록
        slow_threshold_ms: 느린 쿼리 판정 임계값

    Returns:
        입력 순서를 유지한 분류 결과와 그룹
    """
    issues = QueryInsightsIssues()
    groups = {
        IssueType.ERROR: issues.errors,
        IssueType.INDEX: issues.index_issues,
        IssueType.SLOW: issues.slow_queries,
    }

    for row in rows:
        classification = classify_query(row, slow_threshold_ms)
        classified = ClassifiedQuery(
            row=row,
            issue_type=classification.issue_type,
            hint=classification.hint,
            query_type=get_query_type(row.query),
        )
        issues.classified.append(classified)
        if classification.issue_type is not None:
            groups[classification.issue_type].append(classified)

    return issues

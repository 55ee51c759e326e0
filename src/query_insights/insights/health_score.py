"""쿼리 건강도 점수."""

from query_insights.core.models import ClassifiedQuery, HealthLevel

HIGH_CALL_THRESHOLD = 100

# 이슈별 감점
SCORE_DEDUCTIONS = {
    "error": 20,
    "index_high_calls": 15,
    "index_low_calls": 8,
    "slow_high_calls": 10,
    "slow_low_calls": 5,
}

# 등급별 최소 점수 (높은 등급부터)
HEALTH_LEVEL_MIN_SCORES = (
    (HealthLevel.HEALTHY, 70),
    (HealthLevel.WARNING, 40),
    (HealthLevel.CRITICAL, 0),
)

HEALTH_LEVEL_LABELS = {
    HealthLevel.HEALTHY: "Healthy",
    HealthLevel.WARNING: "Needs attention",
    HealthLevel.CRITICAL: "Critical",
}


def get_health_level(score: float) -> HealthLevel:
    """점수에 해당하는 건강도 등급을 반환한다."""
    for level, min_score in HEALTH_LEVEL_MIN_SCORES:
        if score >= min_score:
            return level
    return HealthLevel.CRITICAL


def calculate_health_score(
    errors: list[ClassifiedQuery],
    index_issues: list[ClassifiedQuery],
    slow_queries: list[ClassifiedQuery],
) -> tuple[int, HealthLevel]:
    """이슈 그룹으로부터 0~100 사이 건강도 점수를 계산한다.

    호출 횟수가 많은 쿼리의 이슈일수록 더 크게 감점한다.

    Args:
        errors: advisor 에러 쿼리
        index_issues: 인덱스 추천 쿼리
        slow_queries: 느린 쿼리

    Returns:
        (점수, 등급)
    """
    score = 100
    score -= len(errors) * SCORE_DEDUCTIONS["error"]
    score -= sum(
        SCORE_DEDUCTIONS["index_high_calls"]
        if q.row.calls > HIGH_CALL_THRESHOLD
        else SCORE_DEDUCTIONS["index_low_calls"]
        for q in index_issues
    )
    score -= sum(
        SCORE_DEDUCTIONS["slow_high_calls"]
        if q.row.calls > HIGH_CALL_THRESHOLD / 2
        else SCORE_DEDUCTIONS["slow_low_calls"]
        for q in slow_queries
    )

    score = max(0, min(100, score))
    return score, get_health_level(score)


def format_duration(ms: float) -> str:
    """밀리초를 표시용 문자열로 변환한다 (1초 이상은 초 단위)."""
    if ms >= 1000:
        return f"{ms / 1000:.2f}s"
    return f"{ms}ms"

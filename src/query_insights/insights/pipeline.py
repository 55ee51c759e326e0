"""쿼리 인사이트 진단 파이프라인 오케스트레이터."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from query_insights.core.models import HealthLevel, StatRow
from query_insights.insights.advisor_cache import AdvisorCache, FetchFn
from query_insights.insights.classifier import (
    SLOW_QUERY_THRESHOLD_MS,
    QueryInsightsIssues,
    classify_rows,
)
from query_insights.insights.health_score import (
    HEALTH_LEVEL_LABELS,
    calculate_health_score,
)

logger = logging.getLogger(__name__)


class PipelineStage(Enum):
    """파이프라인 단계."""

    COLLECTING = "collecting"
    ENRICHING = "enriching"
    CLASSIFYING = "classifying"
    SCORING = "scoring"
    COMPLETED = "completed"


@dataclass
class ProgressInfo:
    """진행 상황 정보."""

    stage: PipelineStage
    current: int = 0
    total: int = 0
    message: str = ""


# 진행 상황 콜백 타입
ProgressCallback = Callable[[ProgressInfo], None]


@dataclass
class InsightsReport:
    """진단 결과."""

    rows: list[StatRow] = field(default_factory=list)
    issues: QueryInsightsIssues = field(default_factory=QueryInsightsIssues)
    score: int = 100
    level: HealthLevel = HealthLevel.HEALTHY

    def to_report(self) -> str:
        """진단 결과를 리포트 문자열로 변환.

        Returns:
            리포트 문자열
        """
        lines = [
            "=== 쿼리 인사이트 진단 결과 ===",
            f"분석된 쿼리: {len(self.rows)}건",
            f"에러: {len(self.issues.errors)}건",
            f"인덱스 누락: {len(self.issues.index_issues)}건",
            f"느린 쿼리: {len(self.issues.slow_queries)}건",
            f"건강도: {self.score}점 ({HEALTH_LEVEL_LABELS[self.level]})",
        ]

        flagged = [q for q in self.issues.classified if q.issue_type is not None]
        if flagged:
            lines.append("\n=== 이슈 목록 ===")
            for q in flagged:
                lines.append(f"  - [{q.issue_type.value}] {q.hint}")

        return "\n".join(lines)


class InsightsPipeline:
    """통계 수집 → advisor 보강 → 분류 → 점수 계산 파이프라인."""

    def __init__(
        self,
        stats_collector: Any,
        fetch: FetchFn,
        advisor_cache: Optional[AdvisorCache] = None,
        advisor_enabled: bool = True,
        slow_threshold_ms: float = SLOW_QUERY_THRESHOLD_MS,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> None:
        """파이프라인 초기화.

        Args:
            stats_collector: collect()로 StatRow 목록을 반환하는 수집기
            fetch: advisor 조회 함수
            advisor_cache: advisor 캐시 (None이면 실행마다 새로 생성)
            advisor_enabled: advisor 보강 사용 여부
            slow_threshold_ms: 느린 쿼리 판정 임계값
            progress_callback: 진행 상황 콜백 함수
        """
        self._stats_collector = stats_collector
        self._fetch = fetch
        self._advisor_cache = advisor_cache
        self._advisor_enabled = advisor_enabled
        self._slow_threshold_ms = slow_threshold_ms
        self._progress_callback = progress_callback

    def _notify_progress(self, info: ProgressInfo) -> None:
        """진행 상황을 알림."""
        if self._progress_callback:
            self._progress_callback(info)

    async def run(self) -> InsightsReport:
        """파이프라인을 실행.

        Returns:
            진단 결과
        """
        # 1. 통계 수집
        self._notify_progress(ProgressInfo(
            stage=PipelineStage.COLLECTING,
            message="쿼리 통계 수집 중..."
        ))
        rows = self._stats_collector.collect()

        # 2. advisor 보강
        self._notify_progress(ProgressInfo(
            stage=PipelineStage.ENRICHING,
            total=len(rows),
            message="Index Advisor 분석 중..."
        ))
        cache = self._advisor_cache or AdvisorCache()
        rows = await cache.enrich(rows, self._advisor_enabled, self._fetch)

        # 3. 분류
        self._notify_progress(ProgressInfo(
            stage=PipelineStage.CLASSIFYING,
            total=len(rows),
            message="쿼리 분류 중..."
        ))
        issues = classify_rows(rows, self._slow_threshold_ms)

        # 4. 건강도 점수
        self._notify_progress(ProgressInfo(
            stage=PipelineStage.SCORING,
            message="건강도 계산 중..."
        ))
        score, level = calculate_health_score(
            issues.errors, issues.index_issues, issues.slow_queries
        )

        logger.info(
            "진단 완료: rows=%d errors=%d index=%d slow=%d score=%d",
            len(rows),
            len(issues.errors),
            len(issues.index_issues),
            len(issues.slow_queries),
            score,
        )

        self._notify_progress(ProgressInfo(
            stage=PipelineStage.COMPLETED,
            message="진단 완료!"
        ))

        return InsightsReport(rows=rows, issues=issues, score=score, level=level)

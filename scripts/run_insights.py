#!/usr/bin/env python
"""쿼리 인사이트 진단 실행 스크립트.

사용법:
    python scripts/run_insights.py stats.json                # 기본 실행
    python scripts/run_insights.py stats.json --limit 50     # 상위 50개 쿼리만 진단
    python scripts/run_insights.py stats.json --no-advisor   # advisor 없이 진단
"""

import argparse
import asyncio
import sys
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# 프로젝트 루트 경로 추가
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from query_insights.adapters.advisor import IndexAdvisorClient
from query_insights.core.config import get_settings
from query_insights.core.logging import setup_logging
from query_insights.insights.advisor_cache import AdvisorCache, AdvisorResultStore
from query_insights.insights.health_score import HEALTH_LEVEL_LABELS, format_duration
from query_insights.insights.pipeline import InsightsPipeline, InsightsReport, ProgressInfo
from query_insights.insights.stats_collector import JsonStatsCollector

console = Console()

ISSUE_STYLES = {
    "error": "red",
    "index": "yellow",
    "slow": "dim",
}


def print_report(report: InsightsReport) -> None:
    """진단 결과를 표로 출력."""
    level_label = HEALTH_LEVEL_LABELS[report.level]
    console.print(Panel(
        f"[bold]{report.score}[/bold]점 - {level_label}\n"
        f"에러 {len(report.issues.errors)}건 / "
        f"인덱스 누락 {len(report.issues.index_issues)}건 / "
        f"느린 쿼리 {len(report.issues.slow_queries)}건",
        title="[bold blue]쿼리 건강도[/bold blue]",
        border_style="blue",
    ))

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("이슈", width=8)
    table.add_column("유형", width=8)
    table.add_column("쿼리", overflow="fold")
    table.add_column("호출", justify="right")
    table.add_column("평균 시간", justify="right")
    table.add_column("힌트", overflow="fold")

    for q in report.issues.classified:
        issue = q.issue_type.value if q.issue_type else "-"
        table.add_row(
            issue,
            q.query_type or "-",
            q.row.query[:80],
            str(q.row.calls),
            format_duration(q.row.mean_time),
            q.hint,
            style=ISSUE_STYLES.get(issue),
        )

    console.print(table)


async def run(args: argparse.Namespace) -> InsightsReport:
    settings = get_settings()
    store = AdvisorResultStore(
        maxsize=settings.advisor_cache_maxsize,
        ttl_seconds=settings.advisor_cache_ttl_seconds,
    )
    cache = AdvisorCache(
        store=store,
        context=settings.project_ref,
        max_concurrency=settings.advisor_max_concurrency,
    )

    def on_progress(info: ProgressInfo) -> None:
        console.print(f"[dim]{info.message}[/dim]")

    async with IndexAdvisorClient(settings) as client:
        pipeline = InsightsPipeline(
            stats_collector=JsonStatsCollector(args.stats_file, limit=args.limit),
            fetch=client.fetch,
            advisor_cache=cache,
            advisor_enabled=settings.advisor_enabled and not args.no_advisor,
            slow_threshold_ms=settings.slow_query_threshold_ms,
            progress_callback=on_progress,
        )
        return await pipeline.run()


def main() -> int:
    parser = argparse.ArgumentParser(description="쿼리 인사이트 진단")
    parser.add_argument("stats_file", type=Path, help="쿼리 통계 JSON 파일")
    parser.add_argument("--limit", type=int, default=None, help="진단할 최대 쿼리 수")
    parser.add_argument("--no-advisor", action="store_true", help="Index Advisor 비활성화")
    args = parser.parse_args()

    setup_logging(get_settings().log_level)

    if not args.stats_file.exists():
        console.print(f"[red]통계 파일을 찾을 수 없습니다: {args.stats_file}[/red]")
        return 1

    report = asyncio.run(run(args))
    print_report(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())

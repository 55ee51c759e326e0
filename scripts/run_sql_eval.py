#!/usr/bin/env python
"""에이전트 생성 SQL 평가 스크립트.

사용법:
    python scripts/run_sql_eval.py queries.json      # JSON 배열의 SQL 평가
    python scripts/run_sql_eval.py queries.sql       # ';'로 구분된 SQL 파일 평가
"""

import argparse
import json
import sys
from functools import partial
from pathlib import Path

from rich.console import Console
from rich.table import Table

# 프로젝트 루트 경로 추가
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from query_insights.core.config import get_settings
from query_insights.core.logging import setup_logging
from query_insights.evaluation.scorers import (
    sql_identifier_quoting_scorer,
    sql_syntax_scorer,
)
from query_insights.evaluation.syntax import parse_sql

console = Console()


def load_queries(path: Path) -> list[str]:
    """SQL 목록을 파일에서 읽는다."""
    text = path.read_text(encoding="utf-8")
    if path.suffix == ".json":
        return [str(q) for q in json.loads(text)]
    return [q.strip() for q in text.split(";") if q.strip()]


def main() -> int:
    parser = argparse.ArgumentParser(description="SQL 문법/식별자 quoting 평가")
    parser.add_argument("queries_file", type=Path, help="SQL 목록 파일 (.json 또는 .sql)")
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(settings.log_level)

    queries = load_queries(args.queries_file)
    parse = partial(parse_sql, dialect=settings.sql_dialect)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Scorer", width=24)
    table.add_column("Score", justify="right", width=8)
    table.add_column("Errors", overflow="fold")

    for scorer in (sql_syntax_scorer, sql_identifier_quoting_scorer):
        result = scorer(queries, parse)
        if result is None:
            console.print(f"[dim]{scorer.__name__}: SQL 없음 (건너뜀)[/dim]")
            continue
        errors = (result.metadata or {}).get("errors", [])
        style = "green" if result.score == 1.0 else "yellow"
        table.add_row(result.name, f"{result.score:.2f}", "\n".join(errors), style=style)

    console.print(table)
    return 0


if __name__ == "__main__":
    sys.exit(main())

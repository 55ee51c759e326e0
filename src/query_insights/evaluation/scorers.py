"""에이전트가 생성한 SQL 평가 scorer."""

import logging
from typing import Optional

from query_insights.core.models import ScoreResult
from query_insights.evaluation.quoting import verify
from query_insights.evaluation.syntax import ParseFn, parse_sql, validate_batch

logger = logging.getLogger(__name__)

SQL_PREVIEW_LENGTH = 100


def _preview(sql: str) -> str:
    if len(sql) > SQL_PREVIEW_LENGTH:
        return f"{sql[:SQL_PREVIEW_LENGTH]}..."
    return sql


def sql_syntax_scorer(
    sql_queries: Optional[list[str]], parse: Optional[ParseFn] = None
) -> Optional[ScoreResult]:
    """SQL 문법 유효 비율을 점수로 반환한다.

    Args:
        sql_queries: 에이전트 출력의 SQL 목록
        parse: 파서 함수 (None이면 parse_sql 사용)

    Returns:
        "SQL Validity" 점수. SQL이 없으면 None
    """
    report = validate_batch(sql_queries or [], parse)
    if report is None:
        return None

    return ScoreResult(
        name="SQL Validity",
        score=report.valid_ratio,
        metadata={"errors": report.errors} if report.errors else None,
    )


def sql_identifier_quoting_scorer(
    sql_queries: Optional[list[str]], parse: Optional[ParseFn] = None
) -> Optional[ScoreResult]:
    """quoting이 필요한 식별자가 올바르게 quoting된 비율을 점수로 반환한다.

    파싱에 실패한 SQL은 건너뛴다 (문법 점수에서 따로 반영된다).

    Args:
        sql_queries: 에이전트 출력의 SQL 목록
        parse: 파서 함수 (None이면 parse_sql 사용)

    Returns:
        "SQL Identifier Quoting" 점수. SQL이 없으면 None
    """
    if not sql_queries:
        return None

    parse = parse or parse_sql
    errors = []
    total_needing_quotes = 0
    properly_quoted = 0

    for sql in sql_queries:
        try:
            ast = parse(sql)
        except Exception as e:
            logger.debug("quoting 검사 건너뜀 (파싱 실패): %s", e)
            continue

        for finding in verify(sql, ast):
            if not finding.requires_quoting:
                continue
            total_needing_quotes += 1
            if finding.is_quoted:
                properly_quoted += 1
            else:
                errors.append(
                    f'Identifier "{finding.identifier}" needs quoting '
                    f"but is not quoted in: {_preview(sql)}"
                )

    score = 1.0 if total_needing_quotes == 0 else properly_quoted / total_needing_quotes

    return ScoreResult(
        name="SQL Identifier Quoting",
        score=score,
        metadata={"errors": errors} if errors else None,
    )

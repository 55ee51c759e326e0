"""SQL 파서 경계 및 배치 문법 검증기."""

import logging
from typing import Any, Callable, Optional

import sqlglot
from sqlglot import exp
from sqlglot.errors import SqlglotError

from query_insights.core.errors import SqlParseError
from query_insights.core.models import SyntaxReport

logger = logging.getLogger(__name__)

DEFAULT_DIALECT = "postgres"

# SQL 텍스트를 AST로 변환하거나 예외를 발생시키는 함수
ParseFn = Callable[[str], Any]


def parse_sql(sql: str, dialect: str = DEFAULT_DIALECT) -> exp.Expression:
    """SQL을 파싱해 AST를 반환한다.

    Args:
        sql: SQL 문자열
        dialect: sqlglot 방언

    Returns:
        파싱된 AST

    Raises:
        SqlParseError: 문법 오류 또는 빈 SQL인 경우
    """
    try:
        ast = sqlglot.parse_one(sql, read=dialect)
    except SqlglotError as e:
        raise SqlParseError(str(e)) from e

    # 주석만 있는 SQL 등은 None이 될 수 있다
    if ast is None:
        raise SqlParseError("빈 SQL 문입니다.")
    return ast


def validate_batch(
    statements: list[str], parse: Optional[ParseFn] = None
) -> Optional[SyntaxReport]:
    """SQL 배치의 문법 유효 비율과 에러 메시지를 계산한다.

    Args:
        statements: 검증할 SQL 목록
        parse: 파서 함수 (None이면 parse_sql 사용)

    Returns:
        검증 결과. 배치가 비어 있으면 None (판단 불가)
    """
    if not statements:
        return None

    parse = parse or parse_sql
    errors = []
    valid = 0

    for sql in statements:
        try:
            parse(sql)
            valid += 1
        except Exception as e:
            errors.append(f"SQL syntax error: {e}")

    logger.debug("SQL 문법 검증: total=%d valid=%d", len(statements), valid)

    return SyntaxReport(
        valid_ratio=valid / len(statements),
        errors=errors,
        total=len(statements),
        valid=valid,
    )

"""SQL 식별자 quoting 규칙 및 검증기."""

import re

from sqlglot import exp

from query_insights.core.models import QuotingFinding

# quoting 없이 쓸 수 있는 식별자 (소문자로 접히는 형태)
UNQUOTED_IDENTIFIER_PATTERN = re.compile(r"^[a-z_][a-z0-9_]*$")

# PostgreSQL 예약어 (reserved, reserved (can be function or type))
RESERVED_KEYWORDS = frozenset(
    {
        "all",
        "analyse",
        "analyze",
        "and",
        "any",
        "array",
        "as",
        "asc",
        "asymmetric",
        "authorization",
        "binary",
        "both",
        "case",
        "cast",
        "check",
        "collate",
        "collation",
        "column",
        "concurrently",
        "constraint",
        "create",
        "cross",
        "current_catalog",
        "current_date",
        "current_role",
        "current_schema",
        "current_time",
        "current_timestamp",
        "current_user",
        "default",
        "deferrable",
        "desc",
        "distinct",
        "do",
        "else",
        "end",
        "except",
        "false",
        "fetch",
        "for",
        "foreign",
        "freeze",
        "from",
        "full",
        "grant",
        "group",
        "having",
        "ilike",
        "in",
        "initially",
        "inner",
        "intersect",
        "into",
        "is",
        "isnull",
        "join",
        "lateral",
        "leading",
        "left",
        "like",
        "limit",
        "localtime",
        "localtimestamp",
        "natural",
        "not",
        "notnull",
        "null",
        "offset",
        "on",
        "only",
        "or",
        "order",
        "outer",
        "overlaps",
        "placing",
        "primary",
        "references",
        "returning",
        "right",
        "select",
        "session_user",
        "similar",
        "some",
        "symmetric",
        "system_user",
        "table",
        "tablesample",
        "then",
        "to",
        "trailing",
        "true",
        "union",
        "unique",
        "user",
        "using",
        "variadic",
        "verbose",
        "when",
        "where",
        "window",
        "with",
    }
)


def needs_quoting(identifier: str) -> bool:
    """식별자를 큰따옴표로 감싸야 하는지 판단한다.

    quoting 없는 식별자는 소문자로 접히므로 대문자, 허용되지 않는 문자,
    숫자로 시작하는 이름, 예약어는 모두 quoting이 필요하다.

    Args:
        identifier: 검사할 식별자

    Returns:
        quoting 필요 여부
    """
    if not UNQUOTED_IDENTIFIER_PATTERN.match(identifier):
        return True
    return identifier in RESERVED_KEYWORDS


def extract_identifiers(ast: exp.Expression) -> list[str]:
    """AST에서 식별자 이름을 추출한다 (중복 제거, 등장 순서 유지).

    테이블, 컬럼, 스키마, 별칭, CTE 이름 등 Identifier 노드 전부가 대상이다.

    Args:
        ast: sqlglot 파싱 결과

    Returns:
        식별자 이름 리스트
    """
    names = (node.name for node in ast.find_all(exp.Identifier))
    return list(dict.fromkeys(name for name in names if name))


def is_quoted_in_sql(sql: str, identifier: str) -> bool:
    """원문 SQL에 식별자가 큰따옴표로 감싸져 등장하는지 확인한다.

    텍스트 포함 여부만 보므로 문자열 리터럴 안의 "name"도 일치로 본다.
    """
    escaped = identifier.replace('"', '""')
    return f'"{escaped}"' in sql


def verify(sql: str, ast: exp.Expression) -> list[QuotingFinding]:
    """SQL의 식별자별 quoting 필요 여부와 실제 quoting 여부를 검사한다.

    Args:
        sql: 원문 SQL
        ast: 같은 SQL의 파싱 결과

    Returns:
        식별자별 검사 결과
    """
    findings = []
    for identifier in extract_identifiers(ast):
        findings.append(
            QuotingFinding(
                identifier=identifier,
                requires_quoting=needs_quoting(identifier),
                is_quoted=is_quoted_in_sql(sql, identifier),
            )
        )
    return findings


def quoting_score(findings: list[QuotingFinding]) -> float:
    """quoting이 필요한 식별자 중 올바르게 quoting된 비율.

    quoting이 필요한 식별자가 없으면 1.0이다.
    """
    required = [f for f in findings if f.requires_quoting]
    if not required:
        return 1.0
    return sum(1 for f in required if f.is_quoted) / len(required)

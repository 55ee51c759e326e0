"""Index Advisor 결과 캐시 및 통계 row 보강."""

import asyncio
import logging
import time
from collections import OrderedDict
from dataclasses import replace
from typing import Awaitable, Callable, Optional

from query_insights.core.logging import summarize_sql
from query_insights.core.models import AdvisorResult, StatRow

logger = logging.getLogger(__name__)

# query 텍스트를 받아 advisor 결과를 반환하는 비동기 함수
FetchFn = Callable[[str], Awaitable[Optional[AdvisorResult]]]

# advisor 분석 대상 쿼리 접두어
ELIGIBLE_PREFIXES = ("select", "with")

DEFAULT_CONTEXT = "default"


def is_eligible_query(query: str) -> bool:
    """advisor 분석 대상 쿼리(SELECT / WITH)인지 확인한다."""
    return query.strip().lower().startswith(ELIGIBLE_PREFIXES)


def _mark_retrieved(future: asyncio.Future) -> None:
    # 대기자가 없어도 "exception was never retrieved" 경고가 나지 않도록 한다
    if not future.cancelled():
        future.exception()


class AdvisorResultStore:
    """(context, query) 키 기반 advisor 결과 캐시.

    - maxsize를 넘으면 가장 오래 사용되지 않은 항목부터 제거한다 (LRU).
    - ttl_seconds가 지난 항목은 조회 시 만료된다.
    - 같은 키에 대한 fetch는 동시에 하나만 실행되고,
      진행 중에 들어온 요청은 같은 결과를 기다린다.
    - 실패하거나 취소된 fetch, None 결과는 저장하지 않는다.
    """

    def __init__(
        self,
        maxsize: Optional[int] = None,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """캐시 초기화.

        Args:
            maxsize: 최대 항목 수 (None이면 제한 없음)
            ttl_seconds: 항목 유효 시간 (None이면 만료 없음)
            clock: 단조 증가 시계 함수
        """
        if maxsize is not None and maxsize <= 0:
            raise ValueError("maxsize는 1 이상이어야 합니다.")
        self._maxsize = maxsize
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[tuple[str, str], tuple[float, AdvisorResult]] = (
            OrderedDict()
        )
        self._pending: dict[tuple[str, str], asyncio.Future] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, context: str, query: str) -> Optional[AdvisorResult]:
        """캐시된 결과를 반환 (없거나 만료되었으면 None)."""
        key = (context, query)
        entry = self._entries.get(key)
        if entry is None:
            return None

        stored_at, result = entry
        if self._ttl_seconds is not None and self._clock() - stored_at >= self._ttl_seconds:
            del self._entries[key]
            return None

        self._entries.move_to_end(key)
        return result

    def put(self, context: str, query: str, result: AdvisorResult) -> None:
        """결과를 저장하고 필요 시 오래된 항목을 제거한다."""
        key = (context, query)
        self._entries[key] = (self._clock(), result)
        self._entries.move_to_end(key)
        if self._maxsize is not None:
            while len(self._entries) > self._maxsize:
                self._entries.popitem(last=False)

    def invalidate(self, context: Optional[str] = None) -> None:
        """캐시 항목을 제거한다.

        Args:
            context: 제거할 컨텍스트 (None이면 전체)
        """
        if context is None:
            self._entries.clear()
            return
        for key in [k for k in self._entries if k[0] == context]:
            del self._entries[key]

    async def get_or_fetch(
        self, context: str, query: str, fetch: FetchFn
    ) -> Optional[AdvisorResult]:
        """캐시된 결과를 반환하거나 한 번만 fetch한다.

        Args:
            context: 캐시 컨텍스트 (프로젝트/연결 식별자)
            query: 쿼리 텍스트
            fetch: advisor 조회 함수

        Returns:
            advisor 결과 (fetch가 None을 반환하면 None)

        Raises:
            fetch가 발생시킨 예외 (대기 중인 호출자에게도 전달된다)
        """
        cached = self.get(context, query)
        if cached is not None:
            return cached

        key = (context, query)
        pending = self._pending.get(key)
        if pending is not None:
            # 대기자가 취소되어도 공유 fetch는 계속 진행된다
            return await asyncio.shield(pending)

        future = asyncio.get_running_loop().create_future()
        future.add_done_callback(_mark_retrieved)
        self._pending[key] = future
        try:
            result = await fetch(query)
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as e:
            future.set_exception(e)
            raise
        finally:
            self._pending.pop(key, None)

        if result is not None:
            self.put(context, query, result)
        future.set_result(result)
        return result


class AdvisorCache:
    """통계 row를 advisor 결과로 보강하는 중복 제거 캐시.

    동일한 query 텍스트를 가진 row가 여러 개여도 fetch는 텍스트당 한 번만
    호출된다. 인스턴스 하나가 하나의 보강 컨텍스트이며, 여러 번 enrich를
    호출해도 이미 해결된 텍스트는 다시 fetch하지 않는다.
    """

    def __init__(
        self,
        store: Optional[AdvisorResultStore] = None,
        context: str = DEFAULT_CONTEXT,
        max_concurrency: Optional[int] = None,
    ) -> None:
        """캐시 초기화.

        Args:
            store: 세션 범위 결과 저장소 (None이면 인스턴스 전용 저장소 사용)
            context: 캐시 키 컨텍스트 (프로젝트/연결 식별자)
            max_concurrency: 동시 fetch 상한 (None이면 제한 없음)
        """
        self._store = store if store is not None else AdvisorResultStore()
        self._context = context
        self._max_concurrency = max_concurrency

    @property
    def store(self) -> AdvisorResultStore:
        """결과 저장소."""
        return self._store

    async def enrich(
        self, rows: list[StatRow], enabled: bool, fetch: FetchFn
    ) -> list[StatRow]:
        """대상 row에 advisor 결과를 채워 반환한다.

        Args:
            rows: 통계 row 목록
            enabled: advisor 사용 여부 (False면 입력을 그대로 반환)
            fetch: query 텍스트 하나에 대한 advisor 조회 함수

        Returns:
            입력과 같은 길이/순서의 row 목록. 대상이 아니거나 결과를 얻지
            못한 row는 기존 advisor 결과를 유지한다.
        """
        if not enabled:
            return rows

        # fetch를 시작하기 전에 중복 제거 집합을 확정한다
        queries = list(
            dict.fromkeys(row.query for row in rows if is_eligible_query(row.query))
        )
        if not queries:
            return list(rows)

        logger.debug(
            "advisor 보강 시작: rows=%d distinct_queries=%d", len(rows), len(queries)
        )

        limited_fetch = self._limit(fetch)
        outcomes = await asyncio.gather(
            *(self._store.get_or_fetch(self._context, q, limited_fetch) for q in queries),
            return_exceptions=True,
        )

        resolved: dict[str, AdvisorResult] = {}
        for query, outcome in zip(queries, outcomes):
            if isinstance(outcome, asyncio.CancelledError):
                logger.info("advisor fetch 취소됨: %s", summarize_sql(query))
            elif isinstance(outcome, BaseException):
                logger.warning(
                    "advisor fetch 실패: %s error=%s", summarize_sql(query), outcome
                )
            elif outcome is not None:
                resolved[query] = outcome

        return [
            replace(row, index_advisor_result=resolved[row.query])
            if row.query in resolved
            else row
            for row in rows
        ]

    def _limit(self, fetch: FetchFn) -> FetchFn:
        """동시 실행 상한을 적용한 fetch 함수를 만든다."""
        if self._max_concurrency is None:
            return fetch

        # enrich 호출 단위 세마포어
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def limited(query: str) -> Optional[AdvisorResult]:
            async with semaphore:
                return await fetch(query)

        return limited

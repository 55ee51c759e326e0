"""쿼리 통계 수집기."""

import json
from pathlib import Path

from query_insights.core.errors import InvalidStatRowError
from query_insights.core.models import StatRow


class JsonStatsCollector:
    """JSON 파일에서 쿼리 통계 row를 수집하는 서비스."""

    def __init__(self, json_path: str | Path, limit: int | None = None) -> None:
        """수집기 초기화.

        Args:
            json_path: JSON 파일 경로 (row 딕셔너리 배열)
            limit: 최대 row 수 (None이면 제한 없음)
        """
        self._json_path = Path(json_path)
        self._limit = limit

    def collect(self) -> list[StatRow]:
        """JSON 파일에서 통계 row를 수집.

        Returns:
            total_time 내림차순으로 정렬된 통계 row 리스트

        Raises:
            InvalidStatRowError: 파일 형식 또는 row 형식이 잘못된 경우
        """
        with open(self._json_path, encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, list):
            raise InvalidStatRowError(
                f"통계 파일은 row 배열이어야 합니다: {self._json_path}"
            )

        rows = []
        for idx, item in enumerate(data):
            if not isinstance(item, dict):
                raise InvalidStatRowError(f"{idx}번째 row가 객체가 아닙니다: {item!r}")
            rows.append(StatRow.from_dict(item))

        # 총 실행 시간 기준 내림차순 정렬
        rows.sort(key=lambda x: x.total_time, reverse=True)

        if self._limit:
            rows = rows[: self._limit]

        return rows

"""Index Advisor HTTP 클라이언트."""

from typing import Any, Optional

import httpx

from query_insights.core.config import Settings
from query_insights.core.errors import AdvisorRequestError
from query_insights.core.models import AdvisorResult


class IndexAdvisorClient:
    """원격 Index Advisor API 비동기 클라이언트."""

    def __init__(
        self, settings: Settings, client: Optional[httpx.AsyncClient] = None
    ) -> None:
        """클라이언트 초기화.

        Args:
            settings: 애플리케이션 설정
            client: 사용할 httpx 클라이언트 (None이면 새로 생성)
        """
        self._settings = settings
        self._base_url = settings.advisor_base_url.rstrip("/")
        self._project_ref = settings.project_ref
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=settings.advisor_timeout)

    async def __aenter__(self) -> "IndexAdvisorClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """직접 생성한 httpx 클라이언트를 닫는다."""
        if self._owns_client:
            await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._settings.advisor_api_key:
            headers["Authorization"] = f"Bearer {self._settings.advisor_api_key}"
        return headers

    async def fetch(self, query: str) -> AdvisorResult:
        """쿼리 하나에 대한 인덱스 추천 결과를 조회한다.

        Args:
            query: 분석할 쿼리 텍스트

        Returns:
            advisor 분석 결과

        Raises:
            AdvisorRequestError: 요청 실패 또는 응답 형식 오류 시
        """
        try:
            response = await self._client.post(
                f"{self._base_url}/index-advisor",
                headers=self._headers(),
                json={"query": query, "project_ref": self._project_ref},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise AdvisorRequestError(
                f"Index advisor request failed with status {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise AdvisorRequestError(f"Index advisor request failed: {e}") from e

        if not isinstance(data, dict):
            raise AdvisorRequestError("Index advisor response must be a JSON object")

        return AdvisorResult.from_dict(data)

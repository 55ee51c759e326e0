"""Index Advisor HTTP 클라이언트 테스트."""

import asyncio
import json

import httpx
import pytest

from query_insights.adapters.advisor import IndexAdvisorClient
from query_insights.core.config import Settings
from query_insights.core.errors import AdvisorRequestError
from query_insights.core.models import AdvisorResult


@pytest.fixture
def advisor_settings() -> Settings:
    """advisor 설정 fixture."""
    return Settings(
        advisor_base_url="http://advisor.test/api/v1/",
        advisor_api_key="test-api-key",
        project_ref="proj_123",
    )


def make_client(settings: Settings, handler) -> IndexAdvisorClient:
    """MockTransport를 사용하는 클라이언트 생성."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return IndexAdvisorClient(settings, client=http_client)


class TestIndexAdvisorClientFetch:
    """fetch 테스트."""

    def test_should_post_query_and_map_result(self, advisor_settings: Settings) -> None:
        """쿼리를 전송하고 응답을 AdvisorResult로 변환해야 함."""
        # Given
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(
                200,
                json={
                    "errors": [],
                    "index_statements": ["CREATE INDEX ON public.users USING btree (email)"],
                    "startup_cost_before": 0,
                    "startup_cost_after": 0.29,
                    "total_cost_before": 25.88,
                    "total_cost_after": 8.3,
                },
            )

        client = make_client(advisor_settings, handler)

        # When
        result = asyncio.run(client.fetch("SELECT * FROM users WHERE email = $1"))

        # Then
        assert isinstance(result, AdvisorResult)
        assert result.index_statements == [
            "CREATE INDEX ON public.users USING btree (email)"
        ]
        assert result.total_cost_after == 8.3

        request = requests[0]
        assert request.method == "POST"
        assert str(request.url) == "http://advisor.test/api/v1/index-advisor"
        assert request.headers["Authorization"] == "Bearer test-api-key"
        assert json.loads(request.content) == {
            "query": "SELECT * FROM users WHERE email = $1",
            "project_ref": "proj_123",
        }

    def test_should_omit_authorization_without_api_key(self) -> None:
        """API 키가 없으면 Authorization 헤더를 보내지 않아야 함."""
        # Given
        headers: list[httpx.Headers] = []

        def handler(request: httpx.Request) -> httpx.Response:
            headers.append(request.headers)
            return httpx.Response(200, json={"errors": [], "index_statements": []})

        client = make_client(Settings(advisor_api_key=None), handler)

        # When
        asyncio.run(client.fetch("SELECT 1"))

        # Then
        assert "Authorization" not in headers[0]

    def test_http_error_status_raises_advisor_request_error(
        self, advisor_settings: Settings
    ) -> None:
        """HTTP 에러 응답은 AdvisorRequestError로 변환되어야 함."""
        client = make_client(advisor_settings, lambda request: httpx.Response(503))

        with pytest.raises(AdvisorRequestError, match="503"):
            asyncio.run(client.fetch("SELECT 1"))

    def test_transport_error_raises_advisor_request_error(
        self, advisor_settings: Settings
    ) -> None:
        """연결 실패는 AdvisorRequestError로 변환되어야 함."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(advisor_settings, handler)

        with pytest.raises(AdvisorRequestError, match="connection refused"):
            asyncio.run(client.fetch("SELECT 1"))

    def test_non_object_response_raises_advisor_request_error(
        self, advisor_settings: Settings
    ) -> None:
        """JSON 객체가 아닌 응답은 AdvisorRequestError여야 함."""
        client = make_client(advisor_settings, lambda request: httpx.Response(200, json=[]))

        with pytest.raises(AdvisorRequestError):
            asyncio.run(client.fetch("SELECT 1"))

    def test_analysis_errors_are_data_not_exceptions(
        self, advisor_settings: Settings
    ) -> None:
        """advisor 분석 에러는 예외가 아니라 결과의 errors로 반환되어야 함."""
        client = make_client(
            advisor_settings,
            lambda request: httpx.Response(
                200, json={"errors": ["relation \"missing\" does not exist"]}
            ),
        )

        result = asyncio.run(client.fetch("SELECT * FROM missing"))

        assert result.errors == ['relation "missing" does not exist']
        assert result.index_statements == []


class TestIndexAdvisorClientLifecycle:
    """클라이언트 수명 주기 테스트."""

    def test_injected_client_is_not_closed(self, advisor_settings: Settings) -> None:
        """주입한 httpx 클라이언트는 닫지 않아야 함."""
        # Given
        http_client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json={}))
        )

        async def scenario() -> None:
            async with IndexAdvisorClient(advisor_settings, client=http_client):
                pass

        # When
        asyncio.run(scenario())

        # Then
        assert http_client.is_closed is False

    def test_owned_client_is_closed(self, advisor_settings: Settings) -> None:
        """직접 생성한 httpx 클라이언트는 종료 시 닫아야 함."""
        # Given
        client = IndexAdvisorClient(advisor_settings)

        # When
        asyncio.run(client.aclose())

        # Then
        assert client._client.is_closed is True

"""Core 모듈 데이터 모델 테스트."""

import pytest


class TestAdvisorResult:
    """AdvisorResult 데이터클래스 테스트."""

    def test_defaults_to_empty_lists(self):
        """AdvisorResult의 기본 errors/index_statements는 빈 리스트여야 한다."""
        from query_insights.core.models import AdvisorResult

        result = AdvisorResult()

        assert result.errors == []
        assert result.index_statements == []
        assert result.total_cost_before == 0.0

    def test_from_dict_maps_remote_payload(self):
        """advisor 응답 딕셔너리를 AdvisorResult로 변환할 수 있어야 한다."""
        from query_insights.core.models import AdvisorResult

        result = AdvisorResult.from_dict(
            {
                "errors": None,
                "index_statements": ["CREATE INDEX ON public.users USING btree (email)"],
                "startup_cost_before": 0,
                "startup_cost_after": 0.29,
                "total_cost_before": 25.88,
                "total_cost_after": 8.3,
            }
        )

        assert result.errors == []
        assert result.index_statements == [
            "CREATE INDEX ON public.users USING btree (email)"
        ]
        assert result.startup_cost_after == 0.29
        assert result.total_cost_before == 25.88
        assert result.total_cost_after == 8.3


class TestStatRow:
    """StatRow 데이터클래스 테스트."""

    def test_create_stat_row_with_required_fields(self):
        """query만으로 StatRow를 생성할 수 있어야 한다."""
        from query_insights.core.models import StatRow

        row = StatRow(query="SELECT * FROM users")

        assert row.query == "SELECT * FROM users"
        assert row.calls == 0
        assert row.index_advisor_result is None

    def test_from_dict_reads_statistics_row(self):
        """통계 row 딕셔너리에서 StatRow를 생성할 수 있어야 한다."""
        from query_insights.core.models import AdvisorResult, StatRow

        row = StatRow.from_dict(
            {
                "query": "SELECT * FROM users WHERE id = $1",
                "calls": 10,
                "mean_time": 50,
                "min_time": 10,
                "max_time": 200,
                "total_time": 500,
                "prop_total_time": 5,
                "rows_read": 100,
                "cache_hit_rate": 1,
                "rolname": "postgres",
                "application_name": "test",
                "index_advisor_result": {"errors": ["some error"], "index_statements": []},
                "_total_cache_hits": 3,
                "_total_cache_misses": 1,
            }
        )

        assert row.calls == 10
        assert row.mean_time == 50
        assert row.rolname == "postgres"
        assert row.total_cache_hits == 3
        assert row.total_cache_misses == 1
        assert isinstance(row.index_advisor_result, AdvisorResult)
        assert row.index_advisor_result.errors == ["some error"]

    def test_from_dict_without_query_should_fail_fast(self):
        """query가 없는 row는 InvalidStatRowError를 발생시켜야 한다."""
        from query_insights.core.errors import InvalidStatRowError
        from query_insights.core.models import StatRow

        with pytest.raises(InvalidStatRowError, match="query"):
            StatRow.from_dict({"calls": 1, "mean_time": 10})

    def test_from_dict_with_blank_query_should_fail_fast(self):
        """공백뿐인 query도 잘못된 row로 처리해야 한다."""
        from query_insights.core.errors import InvalidStatRowError
        from query_insights.core.models import StatRow

        with pytest.raises(InvalidStatRowError):
            StatRow.from_dict({"query": "   "})

    def test_from_dict_with_non_numeric_metric_should_fail_fast(self):
        """숫자 필드에 숫자가 아닌 값이 있으면 에러가 발생해야 한다."""
        from query_insights.core.errors import InvalidStatRowError
        from query_insights.core.models import StatRow

        with pytest.raises(InvalidStatRowError, match="mean_time"):
            StatRow.from_dict({"query": "SELECT 1", "mean_time": "fast"})

    def test_invalid_stat_row_error_is_value_error(self):
        """InvalidStatRowError는 ValueError로도 처리할 수 있어야 한다."""
        from query_insights.core.errors import InvalidStatRowError
        from query_insights.core.models import StatRow

        with pytest.raises(ValueError):
            StatRow.from_dict({"query": "SELECT 1", "calls": True})


class TestQuotingFinding:
    """QuotingFinding 데이터클래스 테스트."""

    def test_findings_are_comparable_by_value(self):
        """같은 값의 QuotingFinding은 동등해야 한다."""
        from query_insights.core.models import QuotingFinding

        assert QuotingFinding("Id", True, True) == QuotingFinding(
            identifier="Id", requires_quoting=True, is_quoted=True
        )

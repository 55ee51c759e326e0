"""Index Advisor 어댑터 모듈."""

from query_insights.adapters.advisor.http_client import IndexAdvisorClient

__all__ = ["IndexAdvisorClient"]

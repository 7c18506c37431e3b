"""
Tests for the HTTP source checker, using httpx's mock transport.
"""

import httpx
import pytest

from vendor_status.core.config import FetchSettings
from vendor_status.models.source_config import FeedConfig, PathAddressedConfig
from vendor_status.services.source_checker import (
    SourceChecker,
    SourceCheckResult,
    summarize,
)
from vendor_status.sources import SourceDefinition

FAST_RETRIES = FetchSettings(max_retries=2, backoff_seconds=0)


def _feed_source(name="Gale", url="https://status.example.com/rss"):
    return SourceDefinition(name=name, url=url, config=FeedConfig())


class TestCheckSource:
    """Test single source checks."""

    @pytest.mark.asyncio
    async def test_healthy_feed(self, read_fixture):
        """Test a fetched document is normalized into the result."""
        seen_headers = {}

        def handler(request):
            seen_headers.update(request.headers)
            return httpx.Response(200, text=read_fixture("gale_status.rss"))

        async with SourceChecker(FAST_RETRIES, transport=httpx.MockTransport(handler)) as checker:
            result = await checker.check_source(_feed_source())

        assert result.status_code == 200
        assert result.is_error is True
        assert result.error_message == "1 of 2 components have issues"
        assert result.report.total_components == 2
        assert result.response_time_ms is not None
        assert seen_headers["user-agent"] == "System-Health-Monitor/1.0"

    @pytest.mark.asyncio
    async def test_http_error_short_circuits(self):
        """Test an HTTP error status is reported without parsing the body."""
        transport = httpx.MockTransport(lambda request: httpx.Response(503, text="<rss/>"))

        async with SourceChecker(FAST_RETRIES, transport=transport) as checker:
            result = await checker.check_source(_feed_source())

        assert result.is_error is True
        assert result.status_code == 503
        assert result.error_message == "HTTP 503: Service Unavailable"
        assert result.report is None

    @pytest.mark.asyncio
    async def test_transport_failure_retried(self):
        """Test connection errors are retried, then reported."""
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        async with SourceChecker(FAST_RETRIES, transport=httpx.MockTransport(handler)) as checker:
            result = await checker.check_source(_feed_source())

        assert len(calls) == 2
        assert result.is_error is True
        assert result.status_code is None
        assert result.response_time_ms is None
        assert "connection refused" in result.error_message

    @pytest.mark.asyncio
    async def test_unparseable_body(self):
        """Test a malformed payload becomes a parse-error report, not an exception."""
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="{oops"))
        source = SourceDefinition(
            name="OCLC",
            url="https://status.example.com/api",
            config=PathAddressedConfig(items_path="services", status_field="status"),
        )

        async with SourceChecker(FAST_RETRIES, transport=transport) as checker:
            result = await checker.check_source(source)

        assert result.is_error is True
        assert result.report.parse_error is not None
        assert result.error_message.startswith("Parse error:")


class TestCheckAll:
    """Test concurrent checks and summaries."""

    @pytest.mark.asyncio
    async def test_results_keep_source_order(self, read_fixture):
        def handler(request):
            if request.url.path == "/down":
                return httpx.Response(500)
            return httpx.Response(200, text=read_fixture("gale_status.rss"))

        sources = [
            _feed_source("First", "https://a.example.com/down"),
            _feed_source("Second", "https://b.example.com/rss"),
        ]
        async with SourceChecker(FAST_RETRIES, transport=httpx.MockTransport(handler)) as checker:
            results = await checker.check_all(sources)

        assert [r.name for r in results] == ["First", "Second"]
        assert results[0].status_code == 500
        assert results[1].status_code == 200

    def test_summarize(self):
        results = [
            SourceCheckResult(name="A", url="u", status_code=200, is_error=False, response_time_ms=1.0),
            SourceCheckResult(name="B", url="u", status_code=None, is_error=True, response_time_ms=None),
        ]
        summary = summarize(results)

        assert summary.total_sources == 2
        assert summary.healthy_sources == 1
        assert summary.error_sources == 1
        assert summary.to_dict()["errorSources"] == 1

    def test_result_to_dict(self):
        result = SourceCheckResult(
            name="A", url="u", status_code=503, is_error=True, response_time_ms=12.5,
            error_message="HTTP 503: Service Unavailable",
        )
        data = result.to_dict()
        assert data["status"] == 503
        assert data["isError"] is True
        assert data["report"] is None

"""
Source checker service.

Fetches each vendor's status endpoint over HTTP and runs the body through the
normalization engine. Transport failures are retried; an HTTP error status
is reported as-is without trying to parse the body.
"""

import asyncio
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..core.config import FetchSettings
from ..core.exceptions import NetworkError
from ..models.health import NormalizedReport
from ..sources import SourceDefinition
from .normalization_service import StatusNormalizationService

logger = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SourceCheckResult:
    """Outcome of checking one source."""

    name: str
    url: str
    status_code: Optional[int]
    is_error: bool
    response_time_ms: Optional[float]
    timestamp: datetime = field(default_factory=_utcnow)
    error_message: Optional[str] = None
    report: Optional[NormalizedReport] = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe representation for output and storage."""
        return {
            "name": self.name,
            "url": self.url,
            "status": self.status_code,
            "isError": self.is_error,
            "responseTime": self.response_time_ms,
            "timestamp": self.timestamp.isoformat(),
            "errorMessage": self.error_message,
            "report": self.report.to_wire() if self.report is not None else None,
        }


@dataclass
class HealthSummary:
    """Counts across one round of source checks."""

    total_sources: int
    healthy_sources: int
    error_sources: int
    check_time: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalSources": self.total_sources,
            "healthySources": self.healthy_sources,
            "errorSources": self.error_sources,
            "checkTime": self.check_time.isoformat(),
        }


def summarize(results: list[SourceCheckResult]) -> HealthSummary:
    """Count healthy and failing sources."""
    error_sources = sum(1 for result in results if result.is_error)
    return HealthSummary(
        total_sources=len(results),
        healthy_sources=len(results) - error_sources,
        error_sources=error_sources,
    )


class SourceChecker:
    """
    Fetches and normalizes vendor status documents.

    Use as an async context manager so the HTTP client is closed::

        async with SourceChecker() as checker:
            results = await checker.check_all(DEFAULT_SOURCES)
    """

    def __init__(
        self,
        settings: Optional[FetchSettings] = None,
        service: Optional[StatusNormalizationService] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the checker.

        Args:
            settings: Timeout, user agent and retry settings
            service: Normalization service, a fresh one when omitted
            transport: Custom httpx transport, mainly for tests
        """
        self.settings = settings or FetchSettings()
        self.service = service or StatusNormalizationService()
        self.transport = transport
        self.logger = logger.bind(service="source_checker")
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "SourceChecker":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _ensure_client(self) -> None:
        """Ensure HTTP client is initialized."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={"User-Agent": self.settings.user_agent},
                timeout=self.settings.timeout,
                follow_redirects=True,
                transport=self.transport,
            )

    async def close(self) -> None:
        """Close HTTP client and cleanup resources."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _log_retry(self, retry_state: RetryCallState) -> None:
        outcome = retry_state.outcome
        self.logger.warning(
            "Retrying request",
            attempt=retry_state.attempt_number,
            error=str(outcome.exception()) if outcome is not None else None,
        )

    async def fetch(self, url: str) -> httpx.Response:
        """
        GET a URL, retrying transport failures.

        Raises:
            NetworkError: If every attempt fails at the transport level
        """
        await self._ensure_client()
        assert self._client is not None

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.settings.max_retries),
            wait=wait_exponential(multiplier=self.settings.backoff_seconds, max=30),
            retry=retry_if_exception_type(httpx.TransportError),
            before_sleep=self._log_retry,
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    self.logger.debug("Making request", url=url)
                    return await self._client.get(url)
        except httpx.TransportError as e:
            self.logger.error("Request failed", url=url, error=str(e))
            raise NetworkError(f"Request failed: {e}", details={"url": url}, cause=e) from e

        raise NetworkError("Request was not attempted", details={"url": url})

    async def check_source(self, source: SourceDefinition) -> SourceCheckResult:
        """Fetch one source and normalize its document."""
        start_time = time.perf_counter()

        try:
            response = await self.fetch(source.url)
        except NetworkError as e:
            return SourceCheckResult(
                name=source.name,
                url=source.url,
                status_code=None,
                is_error=True,
                response_time_ms=None,
                error_message=e.message,
            )

        response_time = round((time.perf_counter() - start_time) * 1000, 1)

        if response.status_code >= 400:
            self.logger.warning(
                "Source returned HTTP error",
                source=source.name,
                status_code=response.status_code,
            )
            return SourceCheckResult(
                name=source.name,
                url=source.url,
                status_code=response.status_code,
                is_error=True,
                response_time_ms=response_time,
                error_message=f"HTTP {response.status_code}: {response.reason_phrase}",
            )

        report = self.service.normalize(response.text, source.config)

        self.logger.info(
            "Source checked",
            source=source.name,
            status_code=response.status_code,
            response_time_ms=response_time,
            error_count=report.error_count,
        )
        return SourceCheckResult(
            name=source.name,
            url=source.url,
            status_code=response.status_code,
            is_error=report.has_errors,
            response_time_ms=response_time,
            error_message=report.message,
            report=report,
        )

    async def check_all(self, sources: list[SourceDefinition]) -> list[SourceCheckResult]:
        """Check every source concurrently; results keep the input order."""
        await self._ensure_client()
        results = await asyncio.gather(*(self.check_source(source) for source in sources))
        summary = summarize(list(results))
        self.logger.info(
            "Source check round completed",
            total=summary.total_sources,
            healthy=summary.healthy_sources,
            errors=summary.error_sources,
        )
        return list(results)

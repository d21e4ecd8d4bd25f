"""Async request executor: one choke point for every Rooguys API call."""

from __future__ import annotations

import asyncio
import logging
import time
from collections import defaultdict
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx

from rooguys import __version__
from rooguys.config import ClientConfig
from rooguys.http.envelope import parse_response_body
from rooguys.http.errors import RateLimitError, RooguysError, map_status_to_error
from rooguys.http.metadata import RateLimitInfo, extract_rate_limit_info, extract_request_id
from rooguys.models import CacheMetadata, Pagination
from rooguys.obs.logging import log_event

QueryValue = str | int | float | bool | None
RateLimitWarningHook = Callable[[RateLimitInfo], None]


@dataclass(frozen=True)
class RequestSpec:
    method: str
    path: str
    params: Mapping[str, QueryValue] | None = None
    body: Any = None
    headers: Mapping[str, str] | None = None
    idempotency_key: str | None = None
    timeout_s: float | None = None


@dataclass(frozen=True)
class ApiResponse:
    """
    Normalized result of a successful call.

    Attributes:
        data: Unwrapped response payload.
        request_id: Server request id (header first, then envelope).
        rate_limit: Counters reported with this response.
        pagination: Page window, when the server sent one.
        cache_metadata: Cache details, when the payload carries ``cache_metadata``.
    """
    data: Any
    request_id: str | None
    rate_limit: RateLimitInfo
    pagination: Pagination | None = None
    cache_metadata: CacheMetadata | None = None


@dataclass
class LatencyStats:
    count: int = 0
    total_ms: float = 0.0
    max_ms: float = 0.0

    def observe(self, latency_ms: float) -> None:
        self.count += 1
        self.total_ms += latency_ms
        self.max_ms = max(self.max_ms, latency_ms)

    @property
    def mean_ms(self) -> float:
        return self.total_ms / self.count if self.count else 0.0


@dataclass
class ClientMetrics:
    """Counters keyed by HTTP method so their size does not depend on the ids in request paths."""
    http_requests_total: dict[tuple[str, str], int] = field(default_factory=lambda: defaultdict(int))
    http_retries_total: dict[tuple[str, str], int] = field(default_factory=lambda: defaultdict(int))
    http_latency_ms: dict[str, LatencyStats] = field(default_factory=lambda: defaultdict(LatencyStats))

    def record_request(self, method: str, status: str, latency_ms: float) -> None:
        self.http_requests_total[(method, status)] += 1
        self.http_latency_ms[method].observe(latency_ms)

    def record_retry(self, method: str, reason: str) -> None:
        self.http_retries_total[(method, reason)] += 1


def clean_params(params: Mapping[str, QueryValue] | None) -> dict[str, str | int | float | bool]:
    """Drop ``None`` entries; other falsy values (0, False, "") are kept."""
    if not params:
        return {}
    return {key: value for key, value in params.items() if value is not None}


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _cache_metadata(data: Any) -> CacheMetadata | None:
    if not isinstance(data, Mapping):
        return None
    raw = data.get("cache_metadata") or data.get("cacheMetadata")
    return CacheMetadata.from_payload(raw) if isinstance(raw, Mapping) else None


class HttpClient:
    def __init__(
        self,
        api_key: str,
        config: ClientConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: logging.Logger | None = None,
        on_rate_limit_warning: RateLimitWarningHook | None = None,
    ) -> None:
        self._config = config or ClientConfig()
        self._logger = logger or logging.getLogger(__name__)
        self._on_rate_limit_warning = on_rate_limit_warning
        self._metrics = ClientMetrics()
        self._client = httpx.AsyncClient(
            base_url=self._config.base_url,
            timeout=httpx.Timeout(self._config.timeout_s),
            headers={
                "x-api-key": api_key,
                "Content-Type": "application/json",
                "User-Agent": f"rooguys-python/{__version__}",
            },
            transport=transport,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def metrics(self) -> ClientMetrics:
        return self._metrics

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def get(
        self, path: str, params: Mapping[str, QueryValue] | None = None, **options: Any
    ) -> ApiResponse:
        return await self.execute(RequestSpec("GET", path, params=params, **options))

    async def post(self, path: str, body: Any = None, **options: Any) -> ApiResponse:
        return await self.execute(RequestSpec("POST", path, body=body, **options))

    async def put(self, path: str, body: Any = None, **options: Any) -> ApiResponse:
        return await self.execute(RequestSpec("PUT", path, body=body, **options))

    async def patch(self, path: str, body: Any = None, **options: Any) -> ApiResponse:
        return await self.execute(RequestSpec("PATCH", path, body=body, **options))

    async def delete(self, path: str, **options: Any) -> ApiResponse:
        return await self.execute(RequestSpec("DELETE", path, **options))

    async def execute(self, spec: RequestSpec) -> ApiResponse:
        """
        Dispatch ``spec`` and normalize the outcome.

        Rate limited calls are retried when ``auto_retry`` is enabled, at most
        ``max_retries`` times, each after sleeping the server's Retry-After.
        Every other failure is raised as a ``RooguysError`` on first sight.
        """
        attempt = 0
        while True:
            try:
                return await self._attempt(spec, attempt)
            except RateLimitError as exc:
                will_retry = self._config.auto_retry and attempt < self._config.max_retries
                log_event(
                    self._logger,
                    logging.WARNING,
                    "api_rate_limited",
                    "Rate limit response received",
                    path=spec.path,
                    attempt=attempt + 1,
                    retry_after=exc.retry_after,
                    will_retry=will_retry,
                )
                if not will_retry:
                    self._log_fail(spec.path, exc)
                    raise
                self._metrics.record_retry(spec.method.upper(), "rate_limited")
                await asyncio.sleep(exc.retry_after)
                attempt += 1
            except RooguysError as exc:
                self._log_fail(spec.path, exc)
                raise

    def build_request(self, spec: RequestSpec) -> httpx.Request:
        headers = dict(spec.headers or {})
        if spec.idempotency_key:
            headers["X-Idempotency-Key"] = spec.idempotency_key

        return self._client.build_request(
            spec.method.upper(),
            spec.path,
            params=clean_params(spec.params),
            json=spec.body,
            headers=headers,
            timeout=spec.timeout_s if spec.timeout_s else httpx.USE_CLIENT_DEFAULT,
        )

    async def _attempt(self, spec: RequestSpec, attempt: int) -> ApiResponse:
        request = self.build_request(spec)
        start = time.monotonic()
        try:
            response = await self._client.send(request)
        except httpx.RequestError as exc:
            latency_ms = (time.monotonic() - start) * 1000
            timed_out = isinstance(exc, httpx.TimeoutException) or "timeout" in str(exc)
            self._metrics.record_request(request.method, "timeout" if timed_out else "connection_error", latency_ms)
            if timed_out:
                raise RooguysError("Request timeout", code="TIMEOUT", status_code=408) from exc
            raise RooguysError(str(exc) or "Network error", code="NETWORK_ERROR", status_code=0) from exc

        latency_ms = (time.monotonic() - start) * 1000
        self._metrics.record_request(request.method, str(response.status_code), latency_ms)
        log_event(
            self._logger,
            logging.INFO,
            "http_request",
            f"{request.method} {spec.path}",
            path=spec.path,
            status=response.status_code,
            attempt=attempt + 1,
            latency_ms=round(latency_ms, 2),
        )

        body = _decode_body(response)
        request_id = extract_request_id(response.headers, body)

        if not response.is_success:
            raise map_status_to_error(response.status_code, body, request_id, response.headers)

        rate_limit = extract_rate_limit_info(response.headers)
        if self._on_rate_limit_warning is not None and rate_limit.near_exhaustion:
            log_event(
                self._logger,
                logging.WARNING,
                "rate_limit_warning",
                "Rate limit is more than 80% consumed",
                path=spec.path,
                **rate_limit.to_dict(),
            )
            self._on_rate_limit_warning(rate_limit)

        parsed = parse_response_body(body)
        if parsed.is_error:
            raise map_status_to_error(400, {"error": parsed.error}, request_id, {})

        return ApiResponse(
            data=parsed.data,
            request_id=request_id or parsed.request_id,
            rate_limit=rate_limit,
            pagination=parsed.pagination,
            cache_metadata=_cache_metadata(parsed.data),
        )

    def _log_fail(self, path: str, exc: RooguysError) -> None:
        log_event(
            self._logger,
            logging.ERROR,
            "http_fail",
            f"Request failed for {path}",
            path=path,
            error_type=type(exc).__name__,
            code=exc.code,
            status=exc.status_code,
            request_id=exc.request_id,
        )

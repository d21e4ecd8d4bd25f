import math

import httpx

from rooguys.http.metadata import RateLimitInfo, extract_rate_limit_info, extract_request_id


def test_rate_limit_header_case_insensitive() -> None:
    lower = extract_rate_limit_info(
        {"x-ratelimit-limit": "500", "x-ratelimit-remaining": "42", "x-ratelimit-reset": "1700000000"}
    )
    canonical = extract_rate_limit_info(
        {"X-RateLimit-Limit": "500", "X-RateLimit-Remaining": "42", "X-RateLimit-Reset": "1700000000"}
    )

    assert lower == canonical == RateLimitInfo(limit=500, remaining=42, reset=1700000000)


def test_rate_limit_defaults() -> None:
    assert extract_rate_limit_info({}) == RateLimitInfo(limit=1000, remaining=1000, reset=0)
    assert extract_rate_limit_info(None) == RateLimitInfo(limit=1000, remaining=1000, reset=0)


def test_rate_limit_non_numeric_is_nan() -> None:
    info = extract_rate_limit_info({"X-RateLimit-Limit": "lots", "X-RateLimit-Remaining": "12abc"})

    assert math.isnan(info.limit)
    assert info.remaining == 12
    assert info.near_exhaustion is False


def test_rate_limit_from_httpx_headers() -> None:
    headers = httpx.Headers({"X-RATELIMIT-LIMIT": "100", "x-ratelimit-remaining": "5"})

    assert extract_rate_limit_info(headers) == RateLimitInfo(limit=100, remaining=5, reset=0)


def test_near_exhaustion_boundary() -> None:
    assert RateLimitInfo(limit=1000, remaining=199, reset=0).near_exhaustion is True
    assert RateLimitInfo(limit=1000, remaining=200, reset=0).near_exhaustion is False


def test_request_id_header_wins_over_body() -> None:
    assert extract_request_id({"X-Request-Id": "hdr"}, {"request_id": "body"}) == "hdr"
    assert extract_request_id({"x-request-id": "hdr"}, {"request_id": "body"}) == "hdr"


def test_request_id_body_fallbacks() -> None:
    assert extract_request_id({}, {"request_id": "snake"}) == "snake"
    assert extract_request_id({}, {"requestId": "camel"}) == "camel"
    assert extract_request_id({}, {"other": 1}) is None
    assert extract_request_id({}, "text body") is None
    assert extract_request_id(None, None) is None

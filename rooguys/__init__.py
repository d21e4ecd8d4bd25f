__version__ = "1.0.0"

from rooguys.config import ClientConfig, ConfigError
from rooguys.http.client import ApiResponse, HttpClient, RequestSpec
from rooguys.http.envelope import parse_response_body
from rooguys.http.errors import (
    AuthenticationError,
    ConflictError,
    ErrorKind,
    FieldError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    RooguysError,
    ServerError,
    ValidationError,
    map_status_to_error,
)
from rooguys.http.metadata import RateLimitInfo, extract_rate_limit_info, extract_request_id
from rooguys.models import CacheMetadata, Pagination
from rooguys.sdk import Rooguys

__all__ = [
    "ApiResponse",
    "AuthenticationError",
    "CacheMetadata",
    "ClientConfig",
    "ConfigError",
    "ConflictError",
    "ErrorKind",
    "FieldError",
    "ForbiddenError",
    "HttpClient",
    "NotFoundError",
    "Pagination",
    "RateLimitError",
    "RateLimitInfo",
    "RequestSpec",
    "Rooguys",
    "RooguysError",
    "ServerError",
    "ValidationError",
    "extract_rate_limit_info",
    "extract_request_id",
    "map_status_to_error",
    "parse_response_body",
]

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")

# Error codes carried by failed results
PROVIDER_CONFIG = "provider_config"
PROVIDER_TIMEOUT = "provider_timeout"
PROVIDER_UNAVAILABLE = "provider_unavailable"
PROVIDER_HTTP_ERROR = "provider_http_error"
PROVIDER_BAD_RESPONSE = "provider_bad_response"
DB_ERROR = "db_error"


@dataclass(frozen=True)
class Result(Generic[T]):
    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @staticmethod
    def success(value: T) -> "Result[T]":
        return Result(ok=True, value=value)

    @staticmethod
    def failure(error: str, code: str = "unknown") -> "Result[T]":
        return Result(ok=False, error=error, error_code=code)

    def unwrap_or(self, default: T) -> T:
        return self.value if self.ok else default

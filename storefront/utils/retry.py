# storefront/utils/retry.py
from tenacity import retry, retry_if_exception, retry_if_exception_type, stop_after_attempt, wait_exponential
import requests
import redis

# server-side or throttling statuses worth another attempt; 4xx are final
TRANSIENT_HTTP_STATUSES = frozenset({429, 500, 502, 503, 504})


def is_transient_http_error(exc: BaseException) -> bool:
    if isinstance(exc, (requests.ConnectionError, requests.Timeout)):
        return True
    if isinstance(exc, requests.HTTPError):
        response = exc.response
        return response is not None and response.status_code in TRANSIENT_HTTP_STATUSES
    return False


def http_retry(attempts: int, min_wait: float, max_wait: float):
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=min_wait, min=min_wait, max=max_wait),
        retry=retry_if_exception(is_transient_http_error),
    )


def redis_retry(attempts: int = 3, min_wait: float = 0.2, max_wait: float = 2):
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=min_wait, min=min_wait, max=max_wait),
        retry=retry_if_exception_type(redis.RedisError),
    )

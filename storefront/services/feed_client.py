# storefront/services/feed_client.py
import requests
from requests import RequestException

from storefront.domain.errors import FeedError
from storefront.utils.logging import get_logger
from storefront.utils.retry import http_retry
from storefront.utils.settings import (
    FEED_RETRY_ATTEMPTS,
    FEED_RETRY_MAX_WAIT_SECONDS,
    FEED_RETRY_MIN_WAIT_SECONDS,
    FEED_TIMEOUT_SECONDS,
)

logger = get_logger(__name__)


class FeedClient:
    """
    Downloads a remote CSV product feed.

    Connection errors, timeouts and 429/5xx answers are retried with
    exponential backoff; any other HTTP error fails on the first attempt.
    """

    def __init__(
        self,
        timeout: float = FEED_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
        attempts: int = FEED_RETRY_ATTEMPTS,
        min_wait: float = FEED_RETRY_MIN_WAIT_SECONDS,
        max_wait: float = FEED_RETRY_MAX_WAIT_SECONDS,
    ):
        self.timeout = timeout
        self.session = session or requests.Session()
        self._retrying_get = http_retry(attempts, min_wait, max_wait)(self._get)

    def _get(self, url: str) -> requests.Response:
        logger.info(f"FeedClient GET {url}")
        resp = self.session.get(url, timeout=self.timeout)
        resp.raise_for_status()
        return resp

    def fetch_csv(self, url: str) -> str:
        try:
            resp = self._retrying_get(url)
        except RequestException as e:
            logger.error(f"Feed download failed for {url}: {e}")
            raise FeedError(f"Cannot download feed from {url}") from e
        resp.encoding = resp.encoding or "utf-8"
        return resp.text

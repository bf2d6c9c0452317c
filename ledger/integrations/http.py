import logging

import requests
from django.conf import settings

from ledger.integrations.retry import RetryPolicy, retry_on_exceptions

logger = logging.getLogger(__name__)

_TRANSIENT_ERRORS = (requests.Timeout, requests.ConnectionError)


class NetworkRequestFailed(Exception):
    """Raised when network retries are exhausted."""


def build_session():
    session = requests.Session()
    adapter = requests.adapters.HTTPAdapter(
        pool_connections=settings.SETTLEMENT_HTTP_MAX_CONNECTIONS,
        pool_maxsize=settings.SETTLEMENT_HTTP_MAX_KEEPALIVE,
    )
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


class HttpClient:
    """JSON-over-HTTP transport. Retries transport errors only, never HTTP statuses."""

    def __init__(
        self,
        *,
        session=None,
        connect_timeout=1.0,
        read_timeout=3.0,
        retry_policy=None,
    ):
        self.session = session or build_session()
        self.timeout = (connect_timeout, read_timeout)
        self.retry_policy = retry_policy or RetryPolicy()

    def post_json(self, url, *, json=None, headers=None):
        def send_once():
            return self.session.post(
                url, json=json, headers=headers, timeout=self.timeout
            )

        def log_retry(*, attempt, delay_seconds, exception):
            logger.warning(
                "event=http_retry url=%s attempt=%s delay_ms=%s error=%s",
                url,
                attempt,
                int(delay_seconds * 1000),
                exception.__class__.__name__,
            )

        try:
            return retry_on_exceptions(
                send_once,
                exceptions=_TRANSIENT_ERRORS,
                policy=self.retry_policy,
                on_retry=log_retry,
            )
        except _TRANSIENT_ERRORS as exc:
            raise NetworkRequestFailed(
                f"POST {url} failed after {self.retry_policy.max_attempts} attempt(s)"
            ) from exc

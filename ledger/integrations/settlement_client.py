import logging
import time
from dataclasses import dataclass
from enum import Enum

from django.conf import settings

from ledger.integrations.http import HttpClient, NetworkRequestFailed
from ledger.integrations.retry import RetryPolicy, parse_retry_after_seconds

logger = logging.getLogger(__name__)


class SettlementOutcome(str, Enum):
    SUCCESS = "SUCCESS"
    FINAL_FAILURE = "FINAL_FAILURE"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class SettlementResult:
    outcome: SettlementOutcome
    reference: str | None = None
    error_reason: str | None = None

    def __post_init__(self):
        if not isinstance(self.outcome, SettlementOutcome):
            object.__setattr__(self, "outcome", SettlementOutcome(self.outcome))

    @property
    def success(self):
        return self.outcome == SettlementOutcome.SUCCESS

    @property
    def is_final_failure(self):
        return self.outcome == SettlementOutcome.FINAL_FAILURE

    @classmethod
    def settled(cls, *, reference):
        return cls(outcome=SettlementOutcome.SUCCESS, reference=reference)

    @classmethod
    def final_failure(cls, *, error_reason):
        return cls(outcome=SettlementOutcome.FINAL_FAILURE, error_reason=error_reason)

    @classmethod
    def unknown(cls, *, error_reason):
        return cls(outcome=SettlementOutcome.UNKNOWN, error_reason=error_reason)


class SettlementGateway:
    """Client for the settlement layer that executes outbound payments.

    The settlement endpoint deduplicates on ``X-Idempotency-Key`` so a
    payment whose outcome was unknown can be resent safely.
    """

    def __init__(
        self, *, base_url=None, http_client=None, retry_policy=None, sleep=time.sleep
    ):
        self.base_url = (base_url or settings.SETTLEMENT_BASE_URL).rstrip("/")
        self.http_client = http_client or HttpClient(
            connect_timeout=settings.SETTLEMENT_TIMEOUT,
            read_timeout=settings.SETTLEMENT_TIMEOUT,
        )
        self.retry_policy = retry_policy or RetryPolicy.from_settings()
        self.sleep = sleep

    def _wait_before_retry(self, *, idempotency_key, attempt, reason, retry_after):
        delay = self.retry_policy.delay_for(attempt, retry_after=retry_after)
        logger.warning(
            "event=settlement_retry idempotency_key=%s reason=%s attempt=%s delay_ms=%s",
            idempotency_key,
            reason,
            attempt,
            int(delay * 1000),
        )
        if delay > 0:
            self.sleep(delay)

    def send(self, *, idempotency_key, to_address, amount, denom):
        logger.info(
            "event=settlement_request idempotency_key=%s to_address=%s amount=%s denom=%s",
            idempotency_key,
            to_address,
            amount,
            denom,
        )
        payload = {
            "to_address": to_address,
            "amount": str(amount),
            "unit": denom,
        }
        headers = {"X-Idempotency-Key": idempotency_key}
        url = f"{self.base_url}/payments/"

        for attempt in range(1, self.retry_policy.max_attempts + 1):
            try:
                response = self.http_client.post_json(
                    url, json=payload, headers=headers
                )
            except NetworkRequestFailed:
                if self.retry_policy.can_retry(attempt):
                    self._wait_before_retry(
                        idempotency_key=idempotency_key,
                        attempt=attempt,
                        reason="network_error",
                        retry_after=None,
                    )
                    continue
                logger.warning(
                    "event=settlement_unknown idempotency_key=%s reason=network_error",
                    idempotency_key,
                )
                return SettlementResult.unknown(error_reason="network_error")

            if response.status_code == 429:
                retry_after = parse_retry_after_seconds(
                    response.headers.get("Retry-After")
                )
                if self.retry_policy.can_retry(attempt):
                    self._wait_before_retry(
                        idempotency_key=idempotency_key,
                        attempt=attempt,
                        reason="rate_limited",
                        retry_after=retry_after,
                    )
                    continue
                return SettlementResult.unknown(error_reason="rate_limited")

            result = self._normalize_response(
                response, fallback_reference=idempotency_key
            )
            logger.info(
                "event=settlement_response idempotency_key=%s http_status=%s outcome=%s reason=%s",
                idempotency_key,
                response.status_code,
                result.outcome.value,
                result.error_reason,
            )
            return result

        return SettlementResult.unknown(error_reason="retry_exhausted")

    @staticmethod
    def _normalize_response(response, *, fallback_reference):
        try:
            body = response.json()
        except ValueError:
            return SettlementResult.unknown(
                error_reason=f"invalid_json_response_http_{response.status_code}",
            )
        if not isinstance(body, dict):
            body = {}

        body_state = body.get("data")
        if 200 <= response.status_code < 300 and body_state == "success":
            reference = (
                body.get("reference")
                or body.get("settlement_reference")
                or fallback_reference
            )
            return SettlementResult.settled(reference=reference)

        failure_reason = str(
            body.get("error_reason")
            or body_state
            or f"upstream_status_{response.status_code}"
        )
        if response.status_code >= 500:
            return SettlementResult.unknown(error_reason=failure_reason)
        return SettlementResult.final_failure(error_reason=failure_reason)

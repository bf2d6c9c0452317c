from unittest.mock import Mock

from django.test import SimpleTestCase
from django.test.utils import override_settings

from ledger.integrations.http import NetworkRequestFailed
from ledger.integrations.retry import RetryPolicy
from ledger.integrations.settlement_client import (
    SettlementGateway,
    SettlementOutcome,
    SettlementResult,
)


@override_settings(SETTLEMENT_RETRY_MAX_ATTEMPTS=2)
class SettlementGatewayTests(SimpleTestCase):
    @staticmethod
    def _response(status_code, body, headers=None):
        response = Mock()
        response.status_code = status_code
        response.headers = headers or {}
        response.json.return_value = body
        return response

    def _gateway(self, http_client):
        self.sleep = Mock()
        return SettlementGateway(
            base_url="http://settlement.local/",
            http_client=http_client,
            sleep=self.sleep,
        )

    def _send(self, gateway, key="idem-key-1"):
        return gateway.send(
            idempotency_key=key,
            to_address="recipient_a",
            amount=250,
            denom="usei",
        )

    def test_send_success_is_normalized(self):
        http_client = Mock()
        http_client.post_json.return_value = self._response(
            200, {"data": "success", "reference": "settle-ref-123"}
        )

        result = self._send(self._gateway(http_client))

        self.assertTrue(result.success)
        self.assertEqual(result.reference, "settle-ref-123")
        http_client.post_json.assert_called_once_with(
            "http://settlement.local/payments/",
            json={"to_address": "recipient_a", "amount": "250", "unit": "usei"},
            headers={"X-Idempotency-Key": "idem-key-1"},
        )

    def test_send_uses_idempotency_key_as_reference_when_missing(self):
        http_client = Mock()
        http_client.post_json.return_value = self._response(201, {"data": "success"})

        result = self._send(self._gateway(http_client), key="idem-fallback")

        self.assertTrue(result.success)
        self.assertEqual(result.reference, "idem-fallback")

    def test_client_error_is_final_failure(self):
        http_client = Mock()
        http_client.post_json.return_value = self._response(
            400, {"data": "failed", "error_reason": "account_closed"}
        )

        result = self._send(self._gateway(http_client))

        self.assertTrue(result.is_final_failure)
        self.assertEqual(result.error_reason, "account_closed")

    def test_server_error_is_unknown(self):
        http_client = Mock()
        http_client.post_json.return_value = self._response(503, {})

        result = self._send(self._gateway(http_client))

        self.assertEqual(result.outcome, SettlementOutcome.UNKNOWN)
        self.assertEqual(result.error_reason, "upstream_status_503")

    def test_invalid_json_is_unknown(self):
        http_client = Mock()
        response = self._response(200, None)
        response.json.side_effect = ValueError("no json")
        http_client.post_json.return_value = response

        result = self._send(self._gateway(http_client))

        self.assertEqual(result.outcome, SettlementOutcome.UNKNOWN)
        self.assertEqual(result.error_reason, "invalid_json_response_http_200")

    def test_network_failure_retries_then_reports_unknown(self):
        http_client = Mock()
        http_client.post_json.side_effect = NetworkRequestFailed("boom")

        result = self._send(self._gateway(http_client))

        self.assertEqual(result.outcome, SettlementOutcome.UNKNOWN)
        self.assertEqual(result.error_reason, "network_error")
        self.assertEqual(http_client.post_json.call_count, 2)

    def test_explicit_retry_policy_overrides_settings(self):
        http_client = Mock()
        http_client.post_json.side_effect = NetworkRequestFailed("boom")
        gateway = SettlementGateway(
            base_url="http://settlement.local",
            http_client=http_client,
            retry_policy=RetryPolicy(max_attempts=1),
            sleep=Mock(),
        )

        result = self._send(gateway)

        self.assertEqual(result.error_reason, "network_error")
        http_client.post_json.assert_called_once()
        gateway.sleep.assert_not_called()

    def test_rate_limit_waits_for_retry_after_then_succeeds(self):
        http_client = Mock()
        http_client.post_json.side_effect = [
            self._response(429, {}, headers={"Retry-After": "3"}),
            self._response(200, {"data": "success", "reference": "ok"}),
        ]
        gateway = self._gateway(http_client)

        result = self._send(gateway)

        self.assertTrue(result.success)
        self.sleep.assert_called_once()
        (delay,), _ = self.sleep.call_args
        self.assertGreaterEqual(delay, 3)

    def test_rate_limit_exhaustion_is_unknown(self):
        http_client = Mock()
        http_client.post_json.return_value = self._response(429, {})

        result = self._send(self._gateway(http_client))

        self.assertEqual(result.outcome, SettlementOutcome.UNKNOWN)
        self.assertEqual(result.error_reason, "rate_limited")


class SettlementResultTests(SimpleTestCase):
    def test_outcome_is_coerced_from_string(self):
        result = SettlementResult(outcome="SUCCESS", reference="x")

        self.assertIs(result.outcome, SettlementOutcome.SUCCESS)
        self.assertTrue(result.success)

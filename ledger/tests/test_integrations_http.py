from unittest.mock import Mock

import requests
from django.test import SimpleTestCase

from ledger.integrations.http import HttpClient, NetworkRequestFailed
from ledger.integrations.retry import RetryPolicy


class HttpClientTests(SimpleTestCase):
    def test_post_json_retries_on_network_errors_then_succeeds(self):
        session = Mock()
        response = Mock()
        response.status_code = 200

        session.post.side_effect = [
            requests.Timeout("first timeout"),
            requests.ConnectionError("network down"),
            response,
        ]

        client = HttpClient(
            session=session,
            connect_timeout=0.5,
            read_timeout=2.0,
            retry_policy=RetryPolicy(max_attempts=3),
        )

        result = client.post_json(
            "http://settlement.local/payments/",
            json={"amount": "100"},
            headers={"X-Idempotency-Key": "idem-1"},
        )

        self.assertIs(result, response)
        self.assertEqual(session.post.call_count, 3)
        session.post.assert_called_with(
            "http://settlement.local/payments/",
            json={"amount": "100"},
            headers={"X-Idempotency-Key": "idem-1"},
            timeout=(0.5, 2.0),
        )

    def test_post_json_raises_after_retry_exhaustion(self):
        session = Mock()
        session.post.side_effect = requests.Timeout("always timeout")

        client = HttpClient(session=session, retry_policy=RetryPolicy(max_attempts=2))

        with self.assertRaises(NetworkRequestFailed):
            client.post_json("http://settlement.local/", json={"amount": "100"})

        self.assertEqual(session.post.call_count, 2)

    def test_post_json_does_not_retry_http_errors(self):
        session = Mock()
        response = Mock()
        response.status_code = 500
        session.post.return_value = response

        client = HttpClient(session=session, retry_policy=RetryPolicy(max_attempts=3))

        self.assertIs(client.post_json("http://settlement.local/", json={}), response)
        session.post.assert_called_once()

    def test_default_policy_sends_once(self):
        session = Mock()
        session.post.side_effect = requests.ConnectionError("down")

        with self.assertRaises(NetworkRequestFailed):
            HttpClient(session=session).post_json("http://settlement.local/")

        session.post.assert_called_once()

from datetime import datetime, timedelta, timezone
from email.utils import format_datetime
from unittest.mock import Mock, patch

from django.test import SimpleTestCase
from django.test.utils import override_settings

from ledger.integrations.retry import (
    RetryPolicy,
    full_jitter_delay,
    parse_retry_after_seconds,
    retry_on_exceptions,
)


class RetryHelpersTests(SimpleTestCase):
    def test_full_jitter_delay_is_bounded(self):
        delay = full_jitter_delay(3, base_delay=0.2, max_delay=1.0)
        self.assertGreaterEqual(delay, 0)
        self.assertLessEqual(delay, 0.8)

    def test_full_jitter_delay_rejects_bad_attempt(self):
        with self.assertRaises(ValueError):
            full_jitter_delay(0, base_delay=0.1, max_delay=1.0)

    def test_parse_retry_after_seconds(self):
        self.assertEqual(parse_retry_after_seconds("2"), 2.0)
        self.assertEqual(parse_retry_after_seconds("-5"), 0.0)
        self.assertIsNone(parse_retry_after_seconds(None))
        self.assertIsNone(parse_retry_after_seconds("  "))
        self.assertIsNone(parse_retry_after_seconds("not a date"))

    def test_parse_retry_after_http_date(self):
        retry_at = datetime.now(timezone.utc) + timedelta(seconds=30)

        seconds = parse_retry_after_seconds(format_datetime(retry_at, usegmt=True))

        self.assertGreater(seconds, 20)
        self.assertLessEqual(seconds, 30)


class RetryPolicyTests(SimpleTestCase):
    @override_settings(
        SETTLEMENT_RETRY_MAX_ATTEMPTS=4,
        SETTLEMENT_RETRY_BASE_DELAY=0.5,
        SETTLEMENT_RETRY_MAX_DELAY=3.0,
    )
    def test_from_settings(self):
        self.assertEqual(
            RetryPolicy.from_settings(),
            RetryPolicy(max_attempts=4, base_delay=0.5, max_delay=3.0),
        )

    def test_rejects_invalid_values(self):
        with self.assertRaises(ValueError):
            RetryPolicy(max_attempts=0)
        with self.assertRaises(ValueError):
            RetryPolicy(max_attempts=1, base_delay=-1)

    def test_retry_after_is_a_lower_bound(self):
        policy = RetryPolicy(max_attempts=3, base_delay=0.1, max_delay=0.2)

        self.assertEqual(policy.delay_for(1, retry_after=5), 5)
        self.assertLessEqual(policy.delay_for(1), 0.1)

    def test_can_retry_counts_first_attempt(self):
        policy = RetryPolicy(max_attempts=2)

        self.assertTrue(policy.can_retry(1))
        self.assertFalse(policy.can_retry(2))


class RetryOnExceptionsTests(SimpleTestCase):
    def test_retries_with_callback(self):
        fn = Mock(side_effect=[RuntimeError("x"), "ok"])
        on_retry = Mock()

        result = retry_on_exceptions(
            fn,
            exceptions=(RuntimeError,),
            policy=RetryPolicy(max_attempts=2),
            on_retry=on_retry,
            sleep=lambda *_: None,
        )

        self.assertEqual(result, "ok")
        self.assertEqual(fn.call_count, 2)
        on_retry.assert_called_once()
        self.assertEqual(on_retry.call_args.kwargs["attempt"], 1)

    def test_reraises_after_last_attempt(self):
        fn = Mock(side_effect=RuntimeError("always"))

        with self.assertRaises(RuntimeError):
            retry_on_exceptions(
                fn,
                exceptions=(RuntimeError,),
                policy=RetryPolicy(max_attempts=3),
                sleep=lambda *_: None,
            )

        self.assertEqual(fn.call_count, 3)

    def test_sleeps_for_backoff_delay(self):
        fn = Mock(side_effect=[RuntimeError("x"), "ok"])
        sleep = Mock()

        with patch("ledger.integrations.retry.random.uniform", return_value=0.7):
            retry_on_exceptions(
                fn,
                exceptions=(RuntimeError,),
                policy=RetryPolicy(max_attempts=2, base_delay=1.0, max_delay=1.0),
                sleep=sleep,
            )

        sleep.assert_called_once_with(0.7)

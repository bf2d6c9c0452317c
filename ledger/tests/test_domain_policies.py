from django.test import SimpleTestCase
from django.test.utils import override_settings

from ledger.domain.constants import UINT128_MAX
from ledger.domain.exceptions import (
    InvalidAddress,
    InvalidAmount,
    InvalidDenomination,
    MissingFunds,
    TooManyDenominations,
    UnexpectedFunds,
)
from ledger.domain.messages import Coin
from ledger.domain.policies import (
    normalize_funds,
    require_no_funds,
    require_single_coin,
    validate_address,
    validate_address_format,
    validate_positive_uint128,
    validate_uint128,
)


def upper_case_validator(value):
    return value.upper()


class ValidateUint128Tests(SimpleTestCase):
    def test_rejects_non_integer_values(self):
        for invalid in ("10", 10.5, True, None):
            with self.subTest(invalid=invalid):
                with self.assertRaises(InvalidAmount):
                    validate_uint128(invalid)

    def test_rejects_values_outside_range(self):
        for invalid in (-1, UINT128_MAX + 1):
            with self.subTest(invalid=invalid):
                with self.assertRaises(InvalidAmount):
                    validate_uint128(invalid)

    def test_accepts_bounds(self):
        self.assertEqual(validate_uint128(0), 0)
        self.assertEqual(validate_uint128(UINT128_MAX), UINT128_MAX)

    def test_positive_variant_rejects_zero(self):
        with self.assertRaises(InvalidAmount):
            validate_positive_uint128(0)
        self.assertEqual(validate_positive_uint128(5), 5)


class ValidateAddressTests(SimpleTestCase):
    def test_accepts_lowercase_identifiers(self):
        for valid in ("creator", "recipient_a", "sei1qy352eufqy352euf"):
            with self.subTest(valid=valid):
                self.assertEqual(validate_address_format(valid), valid)

    def test_rejects_malformed_identifiers(self):
        for invalid in ("", "ab", "Creator", "has space", "x" * 91, None, 42):
            with self.subTest(invalid=invalid):
                with self.assertRaises(InvalidAddress):
                    validate_address_format(invalid)

    @override_settings(LEDGER_ADDRESS_PREFIX="sei1")
    def test_enforces_configured_prefix(self):
        self.assertEqual(validate_address_format("sei1abc"), "sei1abc")
        with self.assertRaises(InvalidAddress):
            validate_address_format("cosmos1abc")

    @override_settings(
        LEDGER_ADDRESS_VALIDATOR="ledger.tests.test_domain_policies.upper_case_validator"
    )
    def test_validate_address_uses_configured_validator(self):
        self.assertEqual(validate_address("creator"), "CREATOR")


class FundsPolicyTests(SimpleTestCase):
    def test_normalize_accepts_dicts_and_coins(self):
        coins = normalize_funds([{"denom": "usei", "amount": 3}, Coin("usei", 4)])

        self.assertEqual(coins, [Coin("usei", 3), Coin("usei", 4)])

    def test_normalize_rejects_invalid_amount(self):
        with self.assertRaises(InvalidAmount):
            normalize_funds([{"denom": "usei", "amount": -1}])

    def test_single_coin_rejects_missing_funds(self):
        for empty in (None, []):
            with self.subTest(empty=empty):
                with self.assertRaises(MissingFunds):
                    require_single_coin(empty, "usei")

    def test_single_coin_rejects_multiple_entries(self):
        for funds in (
            [Coin("usei", 1), Coin("usei", 1)],
            [Coin("usei", 1), Coin("btc", 1)],
        ):
            with self.subTest(funds=funds):
                with self.assertRaises(TooManyDenominations):
                    require_single_coin(funds, "usei")

    def test_single_coin_rejects_wrong_denomination(self):
        with self.assertRaises(InvalidDenomination) as ctx:
            require_single_coin([Coin("BTC", 1)], "usei")
        self.assertIn("invalid denomination BTC", str(ctx.exception))

    def test_single_coin_returns_amount(self):
        self.assertEqual(require_single_coin([Coin("usei", 9)], "usei"), 9)

    def test_require_no_funds(self):
        require_no_funds(None)
        require_no_funds([])
        with self.assertRaises(UnexpectedFunds):
            require_no_funds([Coin("usei", 1)])

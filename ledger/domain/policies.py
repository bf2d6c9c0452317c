import re

from django.conf import settings
from django.utils.module_loading import import_string

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

_ADDRESS_RE = re.compile(r"^[a-z0-9_-]+$")
ADDRESS_MIN_LENGTH = 3
ADDRESS_MAX_LENGTH = 90


def validate_uint128(amount, *, field_name="amount"):
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmount(f"{field_name} must be an unsigned integer")

    if amount < 0 or amount > UINT128_MAX:
        raise InvalidAmount(f"{field_name} must be between 0 and 2^128 - 1")

    return amount


def validate_positive_uint128(amount, *, field_name="amount"):
    validate_uint128(amount, field_name=field_name)
    if amount == 0:
        raise InvalidAmount(f"{field_name} must be greater than zero")
    return amount


def validate_address_format(value):
    if not isinstance(value, str):
        raise InvalidAddress("address must be a string")

    if not ADDRESS_MIN_LENGTH <= len(value) <= ADDRESS_MAX_LENGTH:
        raise InvalidAddress(
            f"address length must be between {ADDRESS_MIN_LENGTH} and {ADDRESS_MAX_LENGTH}"
        )

    if value != value.lower():
        raise InvalidAddress(f"address={value} is not normalized")

    if not _ADDRESS_RE.match(value):
        raise InvalidAddress(f"address={value} contains invalid characters")

    prefix = settings.LEDGER_ADDRESS_PREFIX
    if prefix and not value.startswith(prefix):
        raise InvalidAddress(f"address={value} must start with {prefix}")

    return value


def validate_address(value):
    validator = import_string(settings.LEDGER_ADDRESS_VALIDATOR)
    return validator(value)


def normalize_funds(funds):
    coins = []
    for entry in funds or ():
        if isinstance(entry, Coin):
            coin = entry
        else:
            coin = Coin(denom=entry["denom"], amount=entry["amount"])
        validate_uint128(coin.amount, field_name="funds.amount")
        coins.append(coin)
    return coins


def require_no_funds(funds, *, message="no funds required"):
    if normalize_funds(funds):
        raise UnexpectedFunds(message)


def require_single_coin(funds, denom):
    coins = normalize_funds(funds)
    if not coins:
        raise MissingFunds(f"please send {denom}")

    if len(coins) != 1:
        raise TooManyDenominations(f"please only send {denom}")

    coin = coins[0]
    if coin.denom != denom:
        raise InvalidDenomination(
            f"invalid denomination {coin.denom}. please send {denom}"
        )

    return coin.amount

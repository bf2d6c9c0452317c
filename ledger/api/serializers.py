from rest_framework import serializers

from ledger.domain.constants import UINT128_MAX
from ledger.domain.messages import Coin


class Uint128Field(serializers.Field):
    """Unsigned 128-bit integer, read from a JSON string or number, written as a string."""

    default_error_messages = {
        "invalid": "A valid unsigned integer is required.",
        "out_of_range": "Value must be between 0 and 2^128 - 1.",
    }

    def to_internal_value(self, data):
        if isinstance(data, bool):
            self.fail("invalid")
        if isinstance(data, str):
            data = data.strip()
            # isdigit() also accepts superscripts and other non-ASCII digits.
            if not (data.isascii() and data.isdigit()):
                self.fail("invalid")
            data = int(data)
        if not isinstance(data, int):
            self.fail("invalid")

        if data < 0 or data > UINT128_MAX:
            self.fail("out_of_range")
        return data

    def to_representation(self, value):
        return str(value)


class CoinSerializer(serializers.Serializer):
    denom = serializers.CharField(max_length=64)
    amount = Uint128Field()

    def to_internal_value(self, data):
        validated = super().to_internal_value(data)
        return Coin(denom=validated["denom"], amount=validated["amount"])


class ExecuteRequestSerializer(serializers.Serializer):
    sender = serializers.CharField(max_length=128, trim_whitespace=False)
    funds = CoinSerializer(many=True, default=list)


class InstantiateRequestSerializer(ExecuteRequestSerializer):
    send_fee = Uint128Field()


class TransferRequestSerializer(ExecuteRequestSerializer):
    recipient_a = serializers.CharField(max_length=128, trim_whitespace=False)
    recipient_b = serializers.CharField(max_length=128, trim_whitespace=False)


class WithdrawRequestSerializer(ExecuteRequestSerializer):
    amount = Uint128Field()


class OwnerResponseSerializer(serializers.Serializer):
    owner = serializers.CharField()


class SendFeeResponseSerializer(serializers.Serializer):
    fee = Uint128Field()


class BalanceResponseSerializer(serializers.Serializer):
    balance = Uint128Field()

from enum import Enum

UINT128_MAX = 2**128 - 1


class FeeMode(str, Enum):
    ACCRUE = "accrue"
    PAYOUT = "payout"


class PaymentSource(str, Enum):
    FEE = "FEE"
    WITHDRAWAL = "WITHDRAWAL"


class DomainError(Exception):
    """Base class for domain-layer errors."""


class MissingFunds(DomainError):
    """Raised when a transfer carries no attached funds."""


class TooManyDenominations(DomainError):
    """Raised when more than one coin entry is attached to a transfer."""


class InvalidDenomination(DomainError):
    """Raised when the attached coin is not the configured unit."""


class InsufficientForFee(DomainError):
    """Raised when the attached amount does not exceed the send fee."""


class UnevenSplit(DomainError):
    """Raised when amount minus fee cannot be divided evenly in two."""


class InvalidAddress(DomainError):
    """Raised when an account identifier is malformed."""


class InvalidAmount(DomainError):
    """Raised when an amount is not an integer within the Uint128 range."""


class BalanceOverflow(DomainError):
    """Raised when crediting a recipient would exceed the Uint128 range."""


class OwnerBalanceOverflow(BalanceOverflow):
    """Raised when accruing the fee would overflow the owner's balance."""


class UnexpectedFunds(DomainError):
    """Raised when funds are attached to a call that must not carry any."""


class Unauthorized(DomainError):
    """Raised when an account without a ledger entry tries to withdraw."""


class InsufficientFunds(DomainError):
    """Raised when a debit exceeds the current balance."""


class AlreadyInitialized(DomainError):
    """Raised when the ledger configuration already exists."""


class NotInitialized(DomainError):
    """Raised when the ledger configuration has not been created yet."""

import logging

from django.db import IntegrityError, transaction

from ledger.domain.constants import UINT128_MAX
from ledger.domain.exceptions import (
    AlreadyInitialized,
    BalanceOverflow,
    InsufficientFunds,
    NotInitialized,
)
from ledger.models import Balance, ContractConfig
from ledger.models.config import SINGLETON_ID

logger = logging.getLogger(__name__)


class LedgerStore:
    """Data access for the contract configuration and the balance table.

    Holds no business rules beyond the balance-entry lifecycle: entries are
    created on first credit and a non-owner entry is removed as soon as its
    balance reaches zero. Callers are expected to run inside
    ``transaction.atomic()`` so a raised error discards every write.
    """

    @staticmethod
    def get_config():
        config = ContractConfig.objects.filter(pk=SINGLETON_ID).first()
        if config is None:
            raise NotInitialized("ledger has not been instantiated")
        return config

    @staticmethod
    def set_config(*, owner, send_fee, denom, contract_name, contract_version):
        if ContractConfig.objects.filter(pk=SINGLETON_ID).exists():
            raise AlreadyInitialized("ledger is already instantiated")

        try:
            with transaction.atomic():
                return ContractConfig.objects.create(
                    id=SINGLETON_ID,
                    owner=owner,
                    send_fee=send_fee,
                    denom=denom,
                    contract_name=contract_name,
                    contract_version=contract_version,
                )
        except IntegrityError as exc:
            raise AlreadyInitialized("ledger is already instantiated") from exc

    @staticmethod
    def find_balance(account, *, for_update=False):
        queryset = Balance.objects.filter(account=account)
        if for_update:
            queryset = queryset.select_for_update()
        return queryset.first()

    @staticmethod
    def get_balance(account):
        entry = LedgerStore.find_balance(account)
        if entry is None:
            return 0
        return entry.amount

    @staticmethod
    def credit(account, amount, *, overflow_error=BalanceOverflow):
        entry = LedgerStore.find_balance(account, for_update=True)
        if entry is None:
            if amount > UINT128_MAX:
                raise overflow_error(f"balance overflow for account={account}")
            try:
                with transaction.atomic():
                    Balance.objects.create(account=account, amount=amount)
                return amount
            except IntegrityError:
                # A concurrent credit created the entry first; add to it instead.
                logger.info("event=balance_entry_create_race account=%s", account)
                entry = LedgerStore.find_balance(account, for_update=True)

        new_balance = entry.amount + amount
        if new_balance > UINT128_MAX:
            raise overflow_error(f"balance overflow for account={account}")

        entry.amount = new_balance
        entry.save(update_fields=["amount", "updated_at"])
        return new_balance

    @staticmethod
    def debit(account, amount, *, owner):
        entry = LedgerStore.find_balance(account, for_update=True)
        balance = 0 if entry is None else entry.amount
        if amount > balance:
            raise InsufficientFunds(
                f"insufficient funds: account={account} balance={balance} requested={amount}"
            )

        if entry is None:
            return 0

        new_balance = balance - amount
        if new_balance == 0 and account != owner:
            entry.delete()
            logger.info("event=balance_entry_removed account=%s", account)
            return 0

        entry.amount = new_balance
        entry.save(update_fields=["amount", "updated_at"])
        return new_balance

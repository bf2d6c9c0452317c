import logging

from django.conf import settings
from django.db import transaction

from ledger.domain.constants import FeeMode, PaymentSource
from ledger.domain.exceptions import (
    InsufficientForFee,
    InsufficientFunds,
    OwnerBalanceOverflow,
    Unauthorized,
    UnevenSplit,
)
from ledger.domain.messages import ExecutionResult, PaymentInstruction
from ledger.domain.policies import (
    normalize_funds,
    require_no_funds,
    require_single_coin,
    validate_address,
    validate_positive_uint128,
    validate_uint128,
)
from ledger.domain.store import LedgerStore
from ledger.models import OutboundPayment

logger = logging.getLogger(__name__)


def _record_instruction(instruction):
    return OutboundPayment.objects.create(
        to_address=instruction.to_address,
        amount=instruction.amount,
        denom=instruction.denom,
        source=instruction.source.value,
    )


class ContractService:
    @staticmethod
    def instantiate(sender, send_fee, funds=None):
        owner = validate_address(sender)
        fee = validate_uint128(send_fee, field_name="send_fee")
        denom = settings.LEDGER_DENOM

        if settings.LEDGER_REJECT_INIT_FUNDS:
            require_no_funds(
                funds, message="the creator shouldn't send money to this contract"
            )
            initial_balance = 0
        elif normalize_funds(funds):
            initial_balance = require_single_coin(funds, denom)
        else:
            initial_balance = 0

        with transaction.atomic():
            LedgerStore.set_config(
                owner=owner,
                send_fee=fee,
                denom=denom,
                contract_name=settings.LEDGER_CONTRACT_NAME,
                contract_version=settings.LEDGER_CONTRACT_VERSION,
            )
            # The owner entry always exists so fee accrual never has to create it.
            LedgerStore.credit(
                owner, initial_balance, overflow_error=OwnerBalanceOverflow
            )

        logger.info(
            "event=ledger_instantiated owner=%s send_fee=%s denom=%s initial_balance=%s",
            owner,
            fee,
            denom,
            initial_balance,
        )
        return (
            ExecutionResult()
            .add_attribute("action", "instantiate")
            .add_attribute("owner", owner)
            .add_attribute("send_fee", fee)
        )


class TransferService:
    @staticmethod
    def transfer(funds, recipient_a, recipient_b, *, sender=None):
        fee_mode = FeeMode(settings.LEDGER_FEE_MODE)

        with transaction.atomic():
            config = LedgerStore.get_config()
            amount = require_single_coin(funds, config.denom)

            if amount <= config.send_fee:
                raise InsufficientForFee(
                    f"funds <= fee: sent={amount} fee={config.send_fee}"
                )

            to_send = amount - config.send_fee
            if to_send % 2 != 0:
                raise UnevenSplit(
                    f"invalid funds. please send an even number of {config.denom} "
                    f"+ a fee of {config.send_fee}"
                )

            half = to_send // 2
            result = ExecutionResult()

            # Same recipient twice is credited twice, never merged.
            for recipient in (recipient_a, recipient_b):
                address = validate_address(recipient)
                LedgerStore.credit(address, half)

            if config.send_fee > 0:
                if fee_mode == FeeMode.ACCRUE:
                    LedgerStore.credit(
                        config.owner,
                        config.send_fee,
                        overflow_error=OwnerBalanceOverflow,
                    )
                else:
                    instruction = PaymentInstruction(
                        to_address=config.owner,
                        amount=config.send_fee,
                        denom=config.denom,
                        source=PaymentSource.FEE,
                    )
                    _record_instruction(instruction)
                    result.add_message(instruction)

        logger.info(
            "event=transfer_applied sender=%s recipient_a=%s recipient_b=%s amount=%s half=%s fee=%s fee_mode=%s",
            sender,
            recipient_a,
            recipient_b,
            amount,
            half,
            config.send_fee,
            fee_mode.value,
        )
        return (
            result.add_attribute("action", "transfer")
            .add_attribute("recipient_a", half)
            .add_attribute("recipient_b", half)
            .add_attribute("fee", config.send_fee)
        )


class WithdrawalService:
    @staticmethod
    def withdraw(sender, amount, funds=None):
        require_no_funds(funds)

        with transaction.atomic():
            config = LedgerStore.get_config()
            # Only an existing ledger entry authorizes a withdrawal.
            entry = LedgerStore.find_balance(sender, for_update=True)
            if entry is None:
                raise Unauthorized(f"account={sender} has no ledger entry")

            validated_amount = validate_positive_uint128(amount)
            if validated_amount > entry.amount:
                raise InsufficientFunds(
                    f"insufficient funds: balance={entry.amount} requested={validated_amount}"
                )

            account = entry.account
            remaining = LedgerStore.debit(
                account, validated_amount, owner=config.owner
            )
            instruction = PaymentInstruction(
                to_address=account,
                amount=validated_amount,
                denom=config.denom,
                source=PaymentSource.WITHDRAWAL,
            )
            payment = _record_instruction(instruction)

        logger.info(
            "event=withdrawal_applied account=%s amount=%s remaining=%s payment_id=%s",
            account,
            validated_amount,
            remaining,
            payment.id,
        )
        return (
            ExecutionResult()
            .add_message(instruction)
            .add_attribute("action", "withdraw")
            .add_attribute("amount", validated_amount)
        )


class QueryService:
    @staticmethod
    def get_owner():
        return {"owner": LedgerStore.get_config().owner}

    @staticmethod
    def get_send_fee():
        return {"fee": LedgerStore.get_config().send_fee}

    @staticmethod
    def get_balance(account):
        address = validate_address(account)
        return {"balance": LedgerStore.get_balance(address)}

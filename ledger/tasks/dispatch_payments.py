import logging
from dataclasses import dataclass
from datetime import timedelta

from django.conf import settings
from django.db import connection, transaction
from django.db.models import F, Q
from django.utils import timezone

from ledger.domain.exceptions import BalanceOverflow
from ledger.domain.store import LedgerStore
from ledger.integrations.settlement_client import (
    SettlementGateway,
    SettlementOutcome,
    SettlementResult,
)
from ledger.models import OutboundPayment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClaimedPayment:
    payment_id: int
    to_address: str
    amount: int
    denom: str
    idempotency_key: str
    attempts: int


def _with_execution_lock(queryset):
    if connection.features.has_select_for_update:
        if connection.features.has_select_for_update_skip_locked:
            return queryset.select_for_update(skip_locked=True)
        return queryset.select_for_update()
    return queryset


def _claim_next_payment(now, *, exclude_ids, stale_after_seconds):
    stale_before = now - timedelta(seconds=stale_after_seconds)
    queryset = (
        OutboundPayment.objects.filter(
            Q(status=OutboundPayment.Status.PENDING)
            | Q(status=OutboundPayment.Status.PROCESSING, updated_at__lte=stale_before)
        )
        .exclude(pk__in=exclude_ids)
        .order_by("created_at", "id")
    )

    with transaction.atomic():
        payment = _with_execution_lock(queryset).first()
        if payment is None:
            return None

        if payment.status == OutboundPayment.Status.PROCESSING:
            logger.warning(
                "event=payment_reclaimed_processing payment_id=%s idempotency_key=%s",
                payment.id,
                payment.idempotency_key,
            )

        OutboundPayment.objects.filter(pk=payment.pk).update(
            status=OutboundPayment.Status.PROCESSING,
            attempts=F("attempts") + 1,
            updated_at=timezone.now(),
        )
        payment.refresh_from_db(fields=["status", "attempts", "updated_at"])

        return ClaimedPayment(
            payment_id=payment.id,
            to_address=payment.to_address,
            amount=payment.amount,
            denom=payment.denom,
            idempotency_key=payment.idempotency_key,
            attempts=payment.attempts,
        )


def _refund_failed_payment(payment):
    try:
        LedgerStore.credit(payment.to_address, payment.amount)
    except BalanceOverflow:
        logger.error(
            "event=payment_refund_overflow payment_id=%s to_address=%s amount=%s",
            payment.id,
            payment.to_address,
            payment.amount,
        )
        return False
    return True


def _finalize_payment(claim, result, *, max_attempts):
    with transaction.atomic():
        payment = OutboundPayment.objects.select_for_update().get(pk=claim.payment_id)

        if payment.status != OutboundPayment.Status.PROCESSING:
            logger.info(
                "event=payment_finalize_skipped payment_id=%s current_status=%s",
                payment.id,
                payment.status,
            )
            return "skipped"

        if result.outcome == SettlementOutcome.SUCCESS:
            payment.status = OutboundPayment.Status.SETTLED
            payment.settlement_reference = result.reference
            payment.failure_reason = None
            payment.save(
                update_fields=[
                    "status",
                    "settlement_reference",
                    "failure_reason",
                    "updated_at",
                ]
            )
            logger.info(
                "event=payment_settled payment_id=%s to_address=%s amount=%s reference=%s",
                payment.id,
                payment.to_address,
                payment.amount,
                result.reference,
            )
            return "settled"

        if result.outcome == SettlementOutcome.FINAL_FAILURE:
            # Returned to the recipient's withdrawable balance so no value is lost.
            refunded = _refund_failed_payment(payment)
            payment.status = (
                OutboundPayment.Status.FAILED
                if refunded
                else OutboundPayment.Status.UNKNOWN
            )
            payment.failure_reason = result.error_reason or "settlement_failed"
            if not refunded:
                payment.failure_reason = f"{payment.failure_reason};refund_overflow"
            payment.save(update_fields=["status", "failure_reason", "updated_at"])
            logger.warning(
                "event=payment_failed_refunded payment_id=%s to_address=%s amount=%s reason=%s refunded=%s",
                payment.id,
                payment.to_address,
                payment.amount,
                payment.failure_reason,
                refunded,
            )
            return "failed" if refunded else "unknown"

        payment.failure_reason = result.error_reason or "unknown_settlement_outcome"
        if payment.attempts >= max_attempts:
            payment.status = OutboundPayment.Status.UNKNOWN
            outcome = "unknown"
        else:
            payment.status = OutboundPayment.Status.PENDING
            outcome = "requeued"
        payment.save(update_fields=["status", "failure_reason", "updated_at"])
        logger.warning(
            "event=payment_outcome_unknown payment_id=%s attempts=%s reason=%s next_status=%s",
            payment.id,
            payment.attempts,
            payment.failure_reason,
            payment.status,
        )
        return outcome


def dispatch_pending_payments(limit=100, now=None, *, gateway=None):
    summary = {
        "processed": 0,
        "settled": 0,
        "failed": 0,
        "requeued": 0,
        "unknown": 0,
    }
    if limit <= 0:
        return summary

    now = now or timezone.now()
    settlement_gateway = gateway or SettlementGateway()
    max_attempts = settings.SETTLEMENT_MAX_ATTEMPTS
    stale_after_seconds = settings.SETTLEMENT_PROCESSING_STALE_SECONDS
    logger.info(
        "event=dispatcher_start limit=%s now=%s max_attempts=%s stale_after_seconds=%s",
        limit,
        now.isoformat(),
        max_attempts,
        stale_after_seconds,
    )

    attempted_ids = []
    while summary["processed"] < limit:
        claim = _claim_next_payment(
            now,
            exclude_ids=attempted_ids,
            stale_after_seconds=stale_after_seconds,
        )
        if claim is None:
            break
        attempted_ids.append(claim.payment_id)

        try:
            result = settlement_gateway.send(
                idempotency_key=claim.idempotency_key,
                to_address=claim.to_address,
                amount=claim.amount,
                denom=claim.denom,
            )
        except Exception as exc:
            logger.exception(
                "event=dispatcher_gateway_exception payment_id=%s idempotency_key=%s error=%s",
                claim.payment_id,
                claim.idempotency_key,
                exc.__class__.__name__,
            )
            result = SettlementResult.unknown(
                error_reason=f"gateway_exception:{exc.__class__.__name__}",
            )

        outcome = _finalize_payment(claim, result, max_attempts=max_attempts)
        summary["processed"] += 1
        if outcome in summary:
            summary[outcome] += 1

    logger.info(
        "event=dispatcher_end processed=%s settled=%s failed=%s requeued=%s unknown=%s",
        summary["processed"],
        summary["settled"],
        summary["failed"],
        summary["requeued"],
        summary["unknown"],
    )
    return summary

import uuid

from django.db import models

from ledger.models.fields import Uint128Field


def generate_idempotency_key():
    return uuid.uuid4().hex


class OutboundPayment(models.Model):
    class Source(models.TextChoices):
        FEE = "FEE", "Fee payout"
        WITHDRAWAL = "WITHDRAWAL", "Withdrawal"

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        PROCESSING = "PROCESSING", "Processing"
        SETTLED = "SETTLED", "Settled"
        FAILED = "FAILED", "Failed"
        UNKNOWN = "UNKNOWN", "Unknown"

    to_address = models.CharField(max_length=128)
    amount = Uint128Field()
    denom = models.CharField(max_length=32)
    source = models.CharField(max_length=16, choices=Source.choices)
    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.PENDING,
    )
    idempotency_key = models.CharField(
        max_length=128, unique=True, default=generate_idempotency_key
    )
    attempts = models.PositiveIntegerField(default=0)
    settlement_reference = models.CharField(max_length=128, null=True, blank=True)
    failure_reason = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(
                fields=["status", "created_at"], name="payment_status_created_idx"
            ),
        ]

    def __str__(self):
        return f"OutboundPayment<{self.pk}:{self.source}:{self.status}>"

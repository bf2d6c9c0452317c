from django.db import migrations, models

import ledger.models.fields
import ledger.models.payment


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Balance",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("account", models.CharField(max_length=128, unique=True)),
                ("amount", ledger.models.fields.Uint128Field(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name="ContractConfig",
            fields=[
                (
                    "id",
                    models.PositiveSmallIntegerField(
                        default=1,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("owner", models.CharField(max_length=128)),
                ("send_fee", ledger.models.fields.Uint128Field()),
                ("denom", models.CharField(max_length=32)),
                ("contract_name", models.CharField(max_length=128)),
                ("contract_version", models.CharField(max_length=32)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("id", 1)),
                        name="contract_config_singleton",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="OutboundPayment",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("to_address", models.CharField(max_length=128)),
                ("amount", ledger.models.fields.Uint128Field()),
                ("denom", models.CharField(max_length=32)),
                (
                    "source",
                    models.CharField(
                        choices=[("FEE", "Fee payout"), ("WITHDRAWAL", "Withdrawal")],
                        max_length=16,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("PROCESSING", "Processing"),
                            ("SETTLED", "Settled"),
                            ("FAILED", "Failed"),
                            ("UNKNOWN", "Unknown"),
                        ],
                        default="PENDING",
                        max_length=16,
                    ),
                ),
                (
                    "idempotency_key",
                    models.CharField(
                        default=ledger.models.payment.generate_idempotency_key,
                        max_length=128,
                        unique=True,
                    ),
                ),
                ("attempts", models.PositiveIntegerField(default=0)),
                (
                    "settlement_reference",
                    models.CharField(blank=True, max_length=128, null=True),
                ),
                ("failure_reason", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "indexes": [
                    models.Index(
                        fields=["status", "created_at"],
                        name="payment_status_created_idx",
                    )
                ],
            },
        ),
    ]

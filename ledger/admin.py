from django.contrib import admin

from ledger.models import Balance, ContractConfig, OutboundPayment


@admin.register(ContractConfig)
class ContractConfigAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "owner",
        "send_fee",
        "denom",
        "contract_name",
        "contract_version",
        "created_at",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(Balance)
class BalanceAdmin(admin.ModelAdmin):
    list_display = ("id", "account", "amount", "created_at", "updated_at")
    search_fields = ("account",)
    readonly_fields = ("account", "amount")


@admin.register(OutboundPayment)
class OutboundPaymentAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "to_address",
        "amount",
        "denom",
        "source",
        "status",
        "attempts",
        "created_at",
    )
    list_filter = ("source", "status")
    search_fields = ("id", "to_address", "idempotency_key", "settlement_reference")

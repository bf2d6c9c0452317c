from django.db import models
from django.db.models import Q

from ledger.models.fields import Uint128Field

SINGLETON_ID = 1


class ContractConfig(models.Model):
    id = models.PositiveSmallIntegerField(
        primary_key=True, default=SINGLETON_ID, editable=False
    )
    owner = models.CharField(max_length=128)
    send_fee = Uint128Field()
    denom = models.CharField(max_length=32)
    contract_name = models.CharField(max_length=128)
    contract_version = models.CharField(max_length=32)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=Q(id=SINGLETON_ID),
                name="contract_config_singleton",
            ),
        ]

    def __str__(self):
        return f"ContractConfig<{self.owner}:{self.send_fee}{self.denom}>"

from django.db import models

from ledger.models.fields import Uint128Field


class Balance(models.Model):
    account = models.CharField(max_length=128, unique=True)
    amount = Uint128Field(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Balance<{self.account}:{self.amount}>"

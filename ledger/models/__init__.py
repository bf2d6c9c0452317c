from ledger.models.balance import Balance
from ledger.models.config import ContractConfig
from ledger.models.payment import OutboundPayment

__all__ = ["ContractConfig", "Balance", "OutboundPayment"]

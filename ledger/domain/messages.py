from dataclasses import dataclass, field

from ledger.domain.constants import PaymentSource


@dataclass(frozen=True)
class Coin:
    denom: str
    amount: int

    def to_dict(self):
        return {"denom": self.denom, "amount": str(self.amount)}


@dataclass(frozen=True)
class PaymentInstruction:
    """Request for the settlement layer to move value to an external address."""

    to_address: str
    amount: int
    denom: str
    source: PaymentSource

    def to_dict(self):
        return {
            "to_address": self.to_address,
            "amount": str(self.amount),
            "unit": self.denom,
        }


@dataclass
class ExecutionResult:
    messages: list = field(default_factory=list)
    attributes: list = field(default_factory=list)

    def add_message(self, instruction):
        self.messages.append(instruction)
        return self

    def add_attribute(self, key, value):
        self.attributes.append((key, str(value)))
        return self

    def attribute(self, key):
        for attr_key, value in self.attributes:
            if attr_key == key:
                return value
        return None

    def to_dict(self):
        return {
            "messages": [message.to_dict() for message in self.messages],
            "attributes": [
                {"key": key, "value": value} for key, value in self.attributes
            ],
        }

from django.core.exceptions import ValidationError
from django.db import models

from ledger.domain.constants import UINT128_MAX


class Uint128Field(models.Field):
    """Unsigned 128-bit integer persisted as decimal text.

    Database numeric types top out at 64 bits on SQLite and lose precision
    past that, so the value is stored in the same textual form the JSON
    interface uses and converted back to ``int`` on load.
    """

    description = "Unsigned 128-bit integer"

    def __init__(self, *args, **kwargs):
        kwargs["max_length"] = len(str(UINT128_MAX))
        super().__init__(*args, **kwargs)

    def deconstruct(self):
        name, path, args, kwargs = super().deconstruct()
        kwargs.pop("max_length", None)
        return name, path, args, kwargs

    def get_internal_type(self):
        return "CharField"

    def from_db_value(self, value, expression, connection):
        if value is None:
            return value
        return int(value)

    def to_python(self, value):
        if value is None or isinstance(value, int) and not isinstance(value, bool):
            return value
        try:
            parsed = int(str(value).strip())
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"{value!r} is not an unsigned integer") from exc
        if parsed < 0 or parsed > UINT128_MAX:
            raise ValidationError(f"{value!r} is out of the Uint128 range")
        return parsed

    def get_prep_value(self, value):
        value = super().get_prep_value(value)
        if value is None:
            return None
        return str(self.to_python(value))

from __future__ import annotations

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Money on the wire: up to 8 integer digits and 2 decimals, serialized as a string.
MoneyIn = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]


class CamelModel(BaseModel):
    """Base schema emitting camelCase JSON while accepting either spelling on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

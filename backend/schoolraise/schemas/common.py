"""
Base schema shared by every API model.

The JSON contract uses camelCase keys (totalTickets, adminName, ...) while the
Python side keeps snake_case attributes.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def min_length(value: str, length: int, label: str) -> str:
    """Strips the value and checks it keeps at least `length` characters."""
    value = value.strip()
    if len(value) < length:
        raise ValueError(f"{label} must be at least {length} characters.")
    return value

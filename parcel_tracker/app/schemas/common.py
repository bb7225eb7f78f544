"""
Shared Pydantic base for API schemas.

JSON keys are camelCase on the wire; snake_case names are accepted on input too.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


def reject_null(value):
    """For partial updates: a field may be left out, but not set to null."""
    if value is None:
        raise ValueError("Field cannot be null")
    return value

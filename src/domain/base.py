"""Domain Base Model

Shared pydantic configuration for invoice entities.
"""

import uuid
from pydantic import BaseModel as PydanticBaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def generate_uuid() -> str:
    """Generate a random identifier for entities created in-process"""
    return uuid.uuid4().hex


class BaseModel(PydanticBaseModel):
    """
    Base for all invoice entities

    - Frozen: edits produce new instances (model_copy), never in-place mutation
    - Accepts camelCase (stored record shape) and snake_case field names
    - Serializes to camelCase with by_alias=True so records round-trip unchanged
    - Non-finite numbers are accepted here and clamped by the calculator
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        allow_inf_nan=True,
    )

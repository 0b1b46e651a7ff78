"""Pydantic base schema utilities for agent core models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """
    Base Pydantic model for all domain schemas.

    Configures common Pydantic behaviors:
    - ``alias_generator=to_camel``: Serialize with camelCase keys on the wire (``toolName``, ``stepIndex``).
    - ``populate_by_name=True``: Allow initialization by alias or field name.
    - ``extra="forbid"``: Prevent unknown fields from slipping into the model, ensuring strict validation.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

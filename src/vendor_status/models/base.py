"""
Base models for the vendor status system.

This module provides the base Pydantic model with the common configuration
shared by configuration records and engine output.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class VendorStatusModel(BaseModel):
    """
    Base model with common configuration and functionality.

    Instances are immutable once built. Field names are snake_case in Python
    and camelCase on the wire, and either spelling is accepted on input.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="forbid",
    )

    def to_wire(self, **kwargs: Any) -> dict[str, Any]:
        """Dump to a JSON-safe dictionary keyed by camelCase aliases."""
        return self.model_dump(mode="json", by_alias=True, **kwargs)

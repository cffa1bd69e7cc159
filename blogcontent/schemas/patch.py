"""
Base class for partial-update (patch) schemas.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, model_validator


class PatchModel(BaseModel):
    """
    Partial update payload.

    Every field is optional, but a field that is present must carry a
    value: ``{"title": null}`` is rejected rather than treated as
    "clear the title". Unknown and immutable fields are rejected via
    ``extra="forbid"``. An empty patch is rejected.
    """
    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def check_fields(self):
        if not self.model_fields_set:
            raise ValueError("patch must set at least one field")
        nulls = sorted(
            name for name in self.model_fields_set if getattr(self, name) is None
        )
        if nulls:
            raise ValueError(f"fields cannot be null: {', '.join(nulls)}")
        return self

    def changes(self) -> Dict[str, Any]:
        """Fields explicitly set in the patch, with their validated values."""
        return self.model_dump(exclude_unset=True)

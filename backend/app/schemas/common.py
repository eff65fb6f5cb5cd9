"""Common Schema Bases — camelCase wire format and update-command helpers.

Invariants:
    - Wire format is camelCase; Python attributes are snake_case
    - Input models strip surrounding whitespace from strings
    - UpdateCommand subclasses forbid unknown fields and reject explicit null
      for every field listed in NON_NULLABLE

Design Decisions:
    - alias_generator over per-field aliases: one rule for every schema
    - populate_by_name=True: tests and internal callers may use snake_case
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Output base — read from dataclasses/ORM rows, dump as camelCase."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True,
    )

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class CreateCommand(BaseModel):
    """Create payloads — server-controlled fields are ignored, not rejected."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True,
        str_strip_whitespace=True, use_enum_values=True, validate_default=True,
        extra="ignore",
    )


class UpdateCommand(BaseModel):
    """Allow-listed partial update. Only fields the client sent are applied."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True,
        str_strip_whitespace=True, use_enum_values=True, extra="forbid",
    )

    NON_NULLABLE: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def reject_null_for_required_fields(self):
        for name in self.NON_NULLABLE:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        return self

    def changes(self) -> dict:
        """Fields explicitly sent by the client, snake_case keys."""
        return self.model_dump(exclude_unset=True)


def envelope(data, **extras) -> dict:
    """Success envelope shared by every route."""
    return {"success": True, "data": data, **extras}

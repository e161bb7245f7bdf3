"""
Record Schemas
Authorization data returned by the callback or read from the default record file
"""

from types import MappingProxyType
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

# Identifier of a user who has not supplied any identity
ANONYMOUS_IDENTIFIER = ""


class ConnectionSpec(BaseModel):
    """Protocol and parameters describing one remote-access target"""
    model_config = ConfigDict(frozen=True, extra="forbid", coerce_numbers_to_str=True)

    protocol: Optional[str] = Field(None, description="Protocol name, e.g. vnc or rdp (not validated)")
    parameters: Optional[Mapping[str, str]] = Field(None, description="Protocol parameter values by name")

    @field_validator("parameters", mode="after")
    @classmethod
    def freeze_parameters(cls, v):
        return None if v is None else MappingProxyType(dict(v))

    @field_serializer("parameters")
    def dump_parameters(self, v) -> Optional[dict]:
        return None if v is None else dict(v)


class Record(BaseModel):
    """
    Authorization data resolved for one login attempt.

    ``connections`` is a read-only snapshot taken at construction. ``None``
    means the record defines no connections at all, which is distinct from an
    empty mapping.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    username: str = Field(ANONYMOUS_IDENTIFIER, description="Identifier of the subject")
    connections: Optional[Mapping[str, ConnectionSpec]] = Field(
        None, description="Connection specs keyed by identifier"
    )

    @field_validator("username", mode="before")
    @classmethod
    def null_username_is_anonymous(cls, v: Any) -> Any:
        return ANONYMOUS_IDENTIFIER if v is None else v

    @field_validator("connections", mode="after")
    @classmethod
    def freeze_connections(cls, v):
        return None if v is None else MappingProxyType(dict(v))

    @field_serializer("connections")
    def dump_connections(self, v) -> Optional[dict]:
        return None if v is None else {identifier: spec.model_dump() for identifier, spec in v.items()}

from typing import Any, Mapping, Type, TypeVar

from pydantic import BaseModel, ConfigDict

T_Model = TypeVar("T_Model", bound="SpecModel")


class SpecModel(BaseModel):
    """Base class for immutable metadata values with record helpers."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)

    @classmethod
    def from_record(cls: Type[T_Model], data: Mapping[str, Any] | BaseModel) -> T_Model:
        return cls.model_validate(data)


def ensure_non_empty_text(value: str, field_name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{field_name} must be a string")
    if not value.strip():
        raise ValueError(f"{field_name} cannot be empty")
    return value


def foreign_key_column(name: str) -> str:
    """Column name holding a key for ``name``; always ``<name>_id``."""
    return f"{name}_id"

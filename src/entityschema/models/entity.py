from typing import Any, Mapping

from pydantic import Field, ValidationInfo, field_validator, model_validator

from entityschema.models.attribute import AttributeSpec
from entityschema.models.base import SpecModel, ensure_non_empty_text, foreign_key_column
from entityschema.models.relation import BelongsTo, HasMany, HasOne, JoinThrough

IMPLICIT_COLUMNS = ("id", "date_created", "date_updated", "uid")


class EntityMetadata(SpecModel):
    """Declarative description of one entity: its attributes and relations.

    Accepts configuration keys in either snake_case or camelCase
    (``belongsTo``, ``hasBlocks``, ``foreignKey``, ...). The table name
    defaults to the lowercased entity name.
    """

    entity_name: str = Field(alias="entityName")
    table_name: str = Field(alias="tableName")
    attributes: dict[str, AttributeSpec] = Field(default_factory=dict)
    belongs_to: dict[str, BelongsTo] = Field(default_factory=dict, alias="belongsTo")
    has_one: dict[str, HasOne] = Field(default_factory=dict, alias="hasOne")
    has_many: dict[str, HasMany] = Field(default_factory=dict, alias="hasMany")
    has_blocks: dict[str, JoinThrough] = Field(default_factory=dict, alias="hasBlocks")
    has_content: dict[str, JoinThrough] = Field(default_factory=dict, alias="hasContent")

    @model_validator(mode="before")
    @classmethod
    def _apply_default_table_name(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            if "table_name" not in data and "tableName" not in data:
                entity_name = data.get("entity_name", data.get("entityName"))
                if isinstance(entity_name, str):
                    data = dict(data)
                    data["table_name"] = entity_name.lower()
        return data

    @field_validator("entity_name", "table_name")
    @classmethod
    def _ensure_non_empty(cls, value: str, info: ValidationInfo) -> str:
        return ensure_non_empty_text(value, info.field_name or "value")

    @model_validator(mode="after")
    def _validate_names(self) -> "EntityMetadata":
        relation_names = self.relation_names()
        duplicates = sorted({name for name in relation_names if relation_names.count(name) > 1})
        if duplicates:
            raise ValueError(f"relation names must be unique, repeated: {duplicates}")

        attribute_names = set(self.attributes)
        shadowed = sorted(attribute_names & set(relation_names))
        if shadowed:
            raise ValueError(f"attribute and relation names overlap: {shadowed}")

        reserved = sorted(attribute_names & set(IMPLICIT_COLUMNS))
        if reserved:
            raise ValueError(f"attribute names are reserved for implicit columns: {reserved}")

        key_columns = {foreign_key_column(name) for name in self.belongs_to}
        clashes = sorted(key_columns & (attribute_names | set(IMPLICIT_COLUMNS)))
        if clashes:
            raise ValueError(f"belongs_to key columns collide with other columns: {clashes}")
        return self

    def relation_names(self) -> list[str]:
        """All relation names, grouped in compilation order."""
        names: list[str] = []
        for relations in (self.has_blocks, self.has_content, self.has_many, self.has_one, self.belongs_to):
            names.extend(relations)
        return names


__all__ = ["EntityMetadata", "IMPLICIT_COLUMNS"]

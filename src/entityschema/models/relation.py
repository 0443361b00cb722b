"""Relation settings as they appear in entity configuration.

Fields a relation kind needs are optional here. The relation compiler reports
a missing one as RelationSpecError naming the relation.
"""

from typing import Any

from pydantic import Field, model_validator

from entityschema.models.base import SpecModel

ForeignKey = str | dict[str, str]


class BelongsTo(SpecModel):
    model: str | None = None
    required: bool = False

    @model_validator(mode="before")
    @classmethod
    def _expand_shorthand(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"model": data}
        return data


class HasRelation(SpecModel):
    """Settings shared by has-one and has-many relations."""

    model: str | None = None
    foreign_key: ForeignKey | None = Field(default=None, alias="foreignKey")
    through: str | None = None


class HasOne(HasRelation):
    pass


class HasMany(HasRelation):
    pass


class JoinThrough(SpecModel):
    """Settings for the block and content join relations.

    ``foreign_key`` is the prefix of the join table's column pointing back at
    the owning entity; ``through`` names the join entity.
    """

    foreign_key: str | None = Field(default=None, alias="foreignKey")
    through: str | None = None


__all__ = ["BelongsTo", "ForeignKey", "HasMany", "HasOne", "HasRelation", "JoinThrough"]

from pydantic import model_validator

from entityschema.models.base import SpecModel
from entityschema.models.enums import RelationKind
from entityschema.models.relation import ForeignKey


class JoinCondition(SpecModel):
    local_side: str
    join_side: str


class RelationDescriptor(SpecModel):
    """Compiled relation, ready for a query or join builder.

    ``foreign_key`` is a column name or an ordered ``local -> foreign``
    column mapping. For ``has_many_through`` it holds exactly one entry,
    the join table's column back to the owner mapped to its column to the
    target, also exposed as :attr:`join_condition`.
    """

    name: str
    kind: RelationKind
    target: str
    foreign_key: ForeignKey
    through: str | None = None

    @model_validator(mode="after")
    def _validate_through(self) -> "RelationDescriptor":
        if self.kind is RelationKind.HAS_MANY_THROUGH:
            if self.through is None:
                raise ValueError("has_many_through descriptors need a join entity")
            if not isinstance(self.foreign_key, dict) or len(self.foreign_key) != 1:
                raise ValueError("has_many_through descriptors need a single join condition")
        return self

    @property
    def join_condition(self) -> JoinCondition | None:
        if self.kind is not RelationKind.HAS_MANY_THROUGH or not isinstance(self.foreign_key, dict):
            return None
        ((local_side, join_side),) = self.foreign_key.items()
        return JoinCondition(local_side=local_side, join_side=join_side)


__all__ = ["JoinCondition", "RelationDescriptor"]

"""Compile an entity's relation settings into relation descriptors."""

from typing import Any

from entityschema.errors import RelationSpecError
from entityschema.models.base import foreign_key_column
from entityschema.models.descriptor import RelationDescriptor
from entityschema.models.entity import EntityMetadata
from entityschema.models.enums import RelationKind
from entityschema.models.relation import BelongsTo, ForeignKey, HasRelation, JoinThrough

BLOCKS_TARGET = "ContentBlocks"
BLOCKS_JOIN_COLUMN = "block_id"
CONTENT_TARGET = "Content"
CONTENT_JOIN_COLUMN = "content_id"


def compile_relations(entity: EntityMetadata) -> list[RelationDescriptor]:
    """Build one descriptor per declared relation.

    Descriptors are ordered by relation group: blocks, content, has-many,
    has-one, then belongs-to, each group in declaration order.

    Raises:
        RelationSpecError: If a relation lacks a field its kind needs.
    """
    descriptors: list[RelationDescriptor] = []
    for name, join in entity.has_blocks.items():
        descriptors.append(_join_through(name, join, BLOCKS_TARGET, BLOCKS_JOIN_COLUMN))
    for name, join in entity.has_content.items():
        descriptors.append(_join_through(name, join, CONTENT_TARGET, CONTENT_JOIN_COLUMN))
    for name, has_many in entity.has_many.items():
        descriptors.append(_has_relation(name, RelationKind.HAS_MANY, has_many))
    for name, has_one in entity.has_one.items():
        descriptors.append(_has_relation(name, RelationKind.HAS_ONE, has_one))
    for name, belongs_to in entity.belongs_to.items():
        descriptors.append(
            RelationDescriptor(
                name=name,
                kind=RelationKind.BELONGS_TO,
                target=belongs_to_target(name, belongs_to),
                foreign_key=foreign_key_column(name),
            )
        )
    return descriptors


def belongs_to_target(name: str, relation: BelongsTo) -> str:
    """Return the target entity of a belongs-to relation."""
    return _require(name, "model", relation.model)


def _has_relation(name: str, kind: RelationKind, relation: HasRelation) -> RelationDescriptor:
    foreign_key = _require(name, "foreign_key", relation.foreign_key)
    return RelationDescriptor(
        name=name,
        kind=kind,
        target=_require(name, "model", relation.model),
        foreign_key=_key_columns(foreign_key),
        through=relation.through,
    )


def _join_through(name: str, join: JoinThrough, target: str, join_column: str) -> RelationDescriptor:
    local_prefix = _require(name, "foreign_key", join.foreign_key)
    return RelationDescriptor(
        name=name,
        kind=RelationKind.HAS_MANY_THROUGH,
        target=target,
        foreign_key={foreign_key_column(local_prefix): join_column},
        through=_require(name, "through", join.through),
    )


def _key_columns(foreign_key: ForeignKey) -> ForeignKey:
    if isinstance(foreign_key, str):
        return foreign_key_column(foreign_key)
    # composite keys keep their declared column order
    return {foreign_key_column(local): foreign_key_column(remote) for local, remote in foreign_key.items()}


def _require(relation_name: str, field: str, value: Any) -> Any:
    if value is None:
        raise RelationSpecError(relation_name, field)
    if value == "" or value == {}:
        raise RelationSpecError(relation_name, field, reason="empty")
    return value

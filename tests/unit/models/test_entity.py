import pytest
from pydantic import ValidationError

from entityschema.models.attribute import AttributeSpec
from entityschema.models.entity import EntityMetadata
from entityschema.models.enums import AttributeType
from entityschema.models.relation import BelongsTo


def test_table_name_defaults_to_lowercased_entity_name() -> None:
    entity = EntityMetadata(entity_name="ContentBlocks")

    assert entity.table_name == "contentblocks"


def test_explicit_table_name_is_kept() -> None:
    entity = EntityMetadata.model_validate({"entityName": "Article", "tableName": "posts"})

    assert entity.table_name == "posts"


def test_accepts_camel_case_configuration() -> None:
    entity = EntityMetadata.model_validate(
        {
            "entityName": "Article",
            "attributes": {"title": {"type": "string", "maxSize": 255, "required": True}},
            "belongsTo": {"author": "User"},
            "hasBlocks": {"tags": {"foreignKey": "tag", "through": "TagBlocks"}},
        }
    )

    assert entity.attributes["title"] == AttributeSpec(type=AttributeType.STRING, max_size=255, required=True)
    assert entity.belongs_to["author"] == BelongsTo(model="User")
    assert entity.has_blocks["tags"].foreign_key == "tag"


def test_attribute_order_is_preserved() -> None:
    entity = EntityMetadata.model_validate(
        {"entityName": "Article", "attributes": {"z": {}, "a": {}, "m": {}}}
    )

    assert list(entity.attributes) == ["z", "a", "m"]


def test_is_immutable() -> None:
    entity = EntityMetadata(entity_name="Article")

    with pytest.raises(ValidationError):
        entity.table_name = "other"


def test_rejects_empty_entity_name() -> None:
    with pytest.raises(ValidationError):
        EntityMetadata(entity_name="  ")


def test_rejects_unknown_keys() -> None:
    with pytest.raises(ValidationError):
        EntityMetadata.model_validate({"entityName": "Article", "hasAndBelongsToMany": {}})


def test_rejects_repeated_relation_names() -> None:
    with pytest.raises(ValidationError, match="relation names must be unique"):
        EntityMetadata.model_validate(
            {
                "entityName": "Article",
                "belongsTo": {"author": "User"},
                "hasOne": {"author": {"model": "Profile", "foreignKey": "article"}},
            }
        )


def test_rejects_attribute_named_like_relation() -> None:
    with pytest.raises(ValidationError, match="overlap"):
        EntityMetadata.model_validate(
            {"entityName": "Article", "attributes": {"author": {}}, "belongsTo": {"author": "User"}}
        )


def test_rejects_reserved_attribute_names() -> None:
    with pytest.raises(ValidationError, match="reserved"):
        EntityMetadata.model_validate({"entityName": "Article", "attributes": {"uid": {}}})


def test_rejects_key_column_clash() -> None:
    with pytest.raises(ValidationError, match="collide"):
        EntityMetadata.model_validate(
            {"entityName": "Article", "attributes": {"author_id": {}}, "belongsTo": {"author": "User"}}
        )


def test_attribute_spec_defaults() -> None:
    spec = AttributeSpec()

    assert spec.type is AttributeType.STRING
    assert spec.max_size == 150
    assert spec.required is False


def test_attribute_spec_rejects_non_positive_max_size() -> None:
    with pytest.raises(ValidationError):
        AttributeSpec(max_size=0)


def test_relation_names_follow_compilation_order() -> None:
    entity = EntityMetadata.model_validate(
        {
            "entityName": "Article",
            "belongsTo": {"author": "User"},
            "hasMany": {"comments": {"model": "Comment", "foreignKey": "article"}},
            "hasContent": {"pages": {"foreignKey": "page", "through": "PageContent"}},
        }
    )

    assert entity.relation_names() == ["pages", "comments", "author"]


def test_record_round_trip() -> None:
    entity = EntityMetadata.model_validate(
        {
            "entityName": "Article",
            "attributes": {"views": {"type": "integer"}},
            "hasOne": {"summary": {"model": "Summary", "foreignKey": {"article": "source"}}},
        }
    )

    assert EntityMetadata.from_record(entity.to_record()) == entity

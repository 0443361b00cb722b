from enum import StrEnum


class AttributeType(StrEnum):
    STRING = "string"
    TEXT = "text"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    DECIMAL = "decimal"


class RelationKind(StrEnum):
    BELONGS_TO = "belongs_to"
    HAS_ONE = "has_one"
    HAS_MANY = "has_many"
    HAS_MANY_THROUGH = "has_many_through"


class RuleKind(StrEnum):
    REQUIRED = "required"
    NUMERICAL = "numerical"
    LENGTH = "length"
    SAFE = "safe"
